"""Office betting pool: wager on the arrival slot, settle against the recorded outcome."""

__version__ = "1.0.0"

"""
Models for the betting pool.

Usage:
    from betpool.models import Wager, Outcome, Meta
"""
from betpool.models.models import (
    Base,
    Wager,
    Outcome,
    Meta,
    WAGER_OPEN,
    WAGER_WON,
    WAGER_LOST,
)

__all__ = [
    "Base",
    "Wager",
    "Outcome",
    "Meta",
    "WAGER_OPEN",
    "WAGER_WON",
    "WAGER_LOST",
]

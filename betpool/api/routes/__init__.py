"""HTTP routers for the betting pool API."""
from betpool.api.routes import state, bets, arrivals, auth

__all__ = ["state", "bets", "arrivals", "auth"]

"""
Wager Repository for bet rows.

Usage:
    repo = WagerRepository(db)
    open_today = repo.find_open_for_date("2025-03-14")
"""
from typing import List

from betpool.models import Wager, WAGER_OPEN
from betpool.repositories.base import BaseRepository


class WagerRepository(BaseRepository[Wager]):
    """Repository for wager data access."""

    def __init__(self, db):
        super().__init__(Wager, db)

    def find_newest_first(self) -> List[Wager]:
        """All wagers, most recently placed first."""
        return self.find_all(order_by='-created_at')

    def find_by_date(self, date: str) -> List[Wager]:
        """All wagers on a date, whatever their status."""
        return self.query().filter(Wager.date == date).order_by(Wager.created_at).all()

    def find_open_for_date(self, date: str) -> List[Wager]:
        return self.query().filter(
            Wager.date == date,
            Wager.status == WAGER_OPEN
        ).order_by(Wager.created_at).all()

    def find_settled_for_date(self, date: str) -> List[Wager]:
        return self.query().filter(
            Wager.date == date,
            Wager.status != WAGER_OPEN
        ).order_by(Wager.created_at).all()

    def open_stake_total(self) -> float:
        """Sum of stakes still waiting for an outcome."""
        return sum(w.amount for w in self.where(Wager.status == WAGER_OPEN))

"""
Outcome Repository for recorded arrivals.
"""
from typing import List, Optional

from betpool.models import Outcome
from betpool.repositories.base import BaseRepository


class OutcomeRepository(BaseRepository[Outcome]):
    """Repository for outcome records (one per date)."""

    def __init__(self, db):
        super().__init__(Outcome, db)

    def find_by_date(self, date: str) -> Optional[Outcome]:
        return self.find_by_id(date)

    def recent(self, limit: int) -> List[Outcome]:
        """Most recent outcomes, newest date first."""
        return self.find_all(limit=limit, order_by='-date')

    def upsert(self, date: str, slot: str, created_at: str) -> Outcome:
        """
        Insert the outcome for a date, or overwrite its slot.

        The original creation timestamp is kept on overwrite.
        """
        outcome = self.find_by_date(date)
        if outcome is None:
            return self.create(date=date, slot=slot, created_at=created_at)
        outcome.slot = slot
        return outcome

"""
Repository layer for data access.

Usage:
    from betpool.repositories import WagerRepository
    from betpool.core.database import SessionLocal

    db = SessionLocal()
    wagers = WagerRepository(db).find_open_for_date("2025-03-14")
    db.close()
"""

from betpool.repositories.base import BaseRepository
from betpool.repositories.wager_repository import WagerRepository
from betpool.repositories.outcome_repository import OutcomeRepository
from betpool.repositories.meta_repository import MetaRepository

__all__ = [
    "BaseRepository",
    "WagerRepository",
    "OutcomeRepository",
    "MetaRepository",
]

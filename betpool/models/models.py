"""
Database models for the office betting pool.

Table and column names match the SQLite file the pool has always used, so an
existing ``data.db`` opens without migration (see scripts/migrate_db.py for the
one legacy column change).
"""
from sqlalchemy import Column, String, Float, Index, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

WAGER_OPEN = "open"
WAGER_WON = "won"
WAGER_LOST = "lost"


class Wager(Base):
    """A stake on one time slot for one date, priced at placement."""
    __tablename__ = "bets"

    id = Column(String(36), primary_key=True)
    bettor = Column(String(255), nullable=False)
    amount = Column(Float, nullable=False)  # stake, 2 decimals
    slot = Column(String(10), nullable=False)  # e.g. "09:00"
    date = Column(String(10), nullable=False, index=True)  # ISO YYYY-MM-DD
    odds = Column(Float, nullable=False)  # multiplier snapshotted when placed
    status = Column(String(10), nullable=False, default=WAGER_OPEN)  # open, won, lost
    payout = Column(Float, nullable=False, default=0.0)
    created_at = Column("createdAt", String(40), nullable=False)
    topic = Column(String(255), nullable=True)

    __table_args__ = (
        Index('ix_bets_date_status', 'date', 'status'),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "bettor": self.bettor,
            "amount": self.amount,
            "slot": self.slot,
            "date": self.date,
            "odds": self.odds,
            "status": self.status,
            "payout": self.payout,
            "created_at": self.created_at,
            "topic": self.topic,
        }


class Outcome(Base):
    """The slot the event actually happened in, one row per date."""
    __tablename__ = "arrivals"

    date = Column(String(10), primary_key=True)
    slot = Column(String(10), nullable=False)
    created_at = Column("createdAt", String(40), nullable=False)

    def to_dict(self) -> dict:
        return {"date": self.date, "slot": self.slot}


class Meta(Base):
    """Key/value store for process-wide scalars such as the rollover."""
    __tablename__ = "meta"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)

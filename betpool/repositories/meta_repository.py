"""
Meta Repository for process-wide scalars stored as key/value rows.
"""
from betpool.models import Meta
from betpool.repositories.base import BaseRepository

ROLLOVER_KEY = "rollover"


class MetaRepository(BaseRepository[Meta]):
    """Repository for the meta key/value table."""

    def __init__(self, db):
        super().__init__(Meta, db)

    def get_value(self, key: str, default: str | None = None) -> str | None:
        row = self.find_by_id(key)
        return row.value if row is not None else default

    def set_value(self, key: str, value: str) -> Meta:
        row = self.find_by_id(key)
        if row is None:
            return self.create(key=key, value=value)
        row.value = value
        return row

    def get_rollover(self) -> float:
        return float(self.get_value(ROLLOVER_KEY, "0"))

    def set_rollover(self, value: float) -> None:
        self.set_value(ROLLOVER_KEY, str(value))

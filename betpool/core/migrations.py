"""
Schema migrations for pool databases created by older releases.

Older releases stored ``bets.amount`` as INTEGER (whole euros only) and had no
``topic`` column. :func:`migrate_legacy_bets` rebuilds the table with a REAL
amount rounded to cents, after copying the database file to a timestamped
backup. Everything runs in one transaction; on failure it is rolled back and
the backup path is reported.
"""
import logging
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, inspect, text

logger = logging.getLogger(__name__)

CREATE_BETS_NEW = """
CREATE TABLE IF NOT EXISTS bets_new (
    id VARCHAR(36) PRIMARY KEY,
    bettor VARCHAR(255) NOT NULL,
    amount REAL NOT NULL,
    slot VARCHAR(10) NOT NULL,
    date VARCHAR(10) NOT NULL,
    odds REAL NOT NULL,
    status VARCHAR(10) NOT NULL,
    payout REAL NOT NULL,
    createdAt VARCHAR(40) NOT NULL,
    topic VARCHAR(255)
)
"""

COPY_BETS = """
INSERT OR REPLACE INTO bets_new (id, bettor, amount, slot, date, odds, status, payout, createdAt, topic)
SELECT id, bettor, ROUND(CAST(amount AS REAL) * 100) / 100.0, slot, date, odds, status, payout, createdAt, {topic}
FROM bets
"""


class MigrationError(Exception):
    """Migration failed and was rolled back; ``backup_path`` holds the original file."""

    def __init__(self, message: str, backup_path: Optional[Path] = None):
        super().__init__(message)
        self.backup_path = backup_path


@dataclass
class MigrationReport:
    backup_path: Path
    migrated: bool
    rows: int = 0


def backup_database(db_path: Path) -> Path:
    """Copy the database next to itself as ``<name>.<timestamp>.bak``."""
    stamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
    backup_path = db_path.with_name(f"{db_path.name}.{stamp}.bak")
    shutil.copyfile(db_path, backup_path)
    logger.info(f"Backup created: {backup_path}")
    return backup_path


def migrate_legacy_bets(db_path: Path) -> MigrationReport:
    """
    Convert ``bets.amount`` to REAL and add ``topic`` if missing.

    Raises:
        FileNotFoundError: if the database file does not exist
        MigrationError: if a statement fails (the transaction is rolled back)
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"No database found at {db_path}")

    backup_path = backup_database(db_path)
    engine = create_engine(f"sqlite:///{db_path}")

    try:
        with engine.connect() as conn:
            conn.execute(text("PRAGMA foreign_keys = OFF"))
            conn.commit()
            try:
                with conn.begin():
                    inspector = inspect(conn)
                    if "bets" not in inspector.get_table_names():
                        logger.info("No existing bets table found - nothing to migrate")
                        return MigrationReport(backup_path=backup_path, migrated=False)

                    columns = {c["name"] for c in inspector.get_columns("bets")}
                    topic = "topic" if "topic" in columns else "NULL"

                    conn.execute(text(CREATE_BETS_NEW))
                    conn.execute(text(COPY_BETS.format(topic=topic)))
                    rows = conn.execute(text("SELECT COUNT(*) FROM bets_new")).scalar() or 0
                    conn.execute(text("DROP TABLE bets"))
                    conn.execute(text("ALTER TABLE bets_new RENAME TO bets"))
                    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_bets_date ON bets (date)"))
                    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_bets_date_status ON bets (date, status)"))
            finally:
                conn.execute(text("PRAGMA foreign_keys = ON"))
    except Exception as e:
        logger.error(f"Migration failed, rolled back: {e}")
        raise MigrationError(f"Migration failed: {e}. Restore from {backup_path}", backup_path) from e
    finally:
        engine.dispose()

    logger.info(f"Migration applied: bets.amount converted to REAL ({rows} rows)")
    return MigrationReport(backup_path=backup_path, migrated=True, rows=rows)

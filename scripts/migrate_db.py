#!/usr/bin/env python3
"""
Migrate a pool database from an older release.

Usage:
    python scripts/migrate_db.py                # Migrate ./data.db
    python scripts/migrate_db.py path/to/data.db

Converts bets.amount from INTEGER to REAL (rounded to cents) and adds the
topic column. A timestamped .bak copy is written next to the database first.
"""
import sys
import argparse
from pathlib import Path

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Migrate a betting pool database")
    parser.add_argument(
        "db_path",
        nargs="?",
        default=str(Path.cwd() / "data.db"),
        help="Path to the SQLite database (default: ./data.db)"
    )
    args = parser.parse_args()

    from betpool.core.migrations import migrate_legacy_bets, MigrationError

    try:
        report = migrate_legacy_bets(Path(args.db_path))
    except FileNotFoundError as e:
        logger.error(f"✗ {e}. Aborting.")
        return 1
    except MigrationError as e:
        logger.error(f"✗ {e}")
        logger.error(f"  You can restore from backup: {e.backup_path}")
        return 2

    if report.migrated:
        logger.info(f"✓ Migration finished successfully ({report.rows} bets)")
    else:
        logger.info("✓ Nothing to migrate")
    logger.info(f"  Original database backed up to {report.backup_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

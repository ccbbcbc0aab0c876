"""Tests for the legacy database migration (INTEGER stakes -> REAL)."""
import sqlite3

import pytest

from betpool.core.migrations import migrate_legacy_bets

LEGACY_SCHEMA = """
CREATE TABLE bets (
    id TEXT PRIMARY KEY,
    bettor TEXT NOT NULL,
    amount INTEGER NOT NULL,
    slot TEXT NOT NULL,
    date TEXT NOT NULL,
    odds REAL NOT NULL,
    status TEXT NOT NULL,
    payout REAL NOT NULL,
    createdAt TEXT NOT NULL
);
"""


@pytest.fixture
def legacy_db(tmp_path):
    path = tmp_path / "data.db"
    conn = sqlite3.connect(path)
    conn.executescript(LEGACY_SCHEMA)
    conn.execute(
        "INSERT INTO bets VALUES ('b1', 'Anna', 10, '09:00', '2025-03-14', 4.33, 'open', 0, '2025-03-13T08:00:00Z')"
    )
    conn.commit()
    conn.close()
    return path


def test_migrates_amount_to_real_and_adds_topic(legacy_db):
    report = migrate_legacy_bets(legacy_db)

    assert report.migrated is True
    assert report.rows == 1
    assert report.backup_path.exists()

    conn = sqlite3.connect(legacy_db)
    columns = {row[1]: row[2] for row in conn.execute("PRAGMA table_info(bets)")}
    amount, topic = conn.execute("SELECT amount, topic FROM bets WHERE id='b1'").fetchone()
    conn.close()

    assert columns["amount"] == "REAL"
    assert "topic" in columns
    assert amount == 10.0
    assert topic is None


def test_database_without_bets_table(tmp_path):
    path = tmp_path / "data.db"
    sqlite3.connect(path).close()

    report = migrate_legacy_bets(path)

    assert report.migrated is False


def test_missing_database(tmp_path):
    with pytest.raises(FileNotFoundError):
        migrate_legacy_bets(tmp_path / "missing.db")

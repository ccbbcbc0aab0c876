"""Shared pytest fixtures for the betting pool tests."""
import os
import sys
from pathlib import Path
from typing import Generator

# Settings are read at import time, so the test environment goes in first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_SECRET"] = "test-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_JSON"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory database per test, shared by every connection."""
    from betpool.models import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def pool_settings():
    """Pool rules as configured for the office (6 slots, 7-day window, 12% margin)."""
    from betpool.core.config import Settings

    return Settings(
        ADMIN_SECRET="test-secret",
        HISTORY_WINDOW=7,
        HISTORY_LIMIT=30,
        HISTORY_DISPLAY=14,
        HOUSE_MARGIN=0.12,
        DEFAULT_ODDS=1.5,
        STREAK_SLOT="11:00",
    )


@pytest.fixture
def pool_service(db_session, pool_settings):
    from betpool.services.pool_service import PoolService

    return PoolService(db_session, pool_settings)


@pytest.fixture
def add_outcomes(db_session):
    """Insert outcome rows directly: add_outcomes([("2025-03-10", "09:00"), ...])."""
    from betpool.models import Outcome

    def _add(rows):
        for date, slot in rows:
            db_session.add(Outcome(date=date, slot=slot, created_at=f"{date}T12:00:00+00:00"))
        db_session.commit()

    return _add


@pytest.fixture(scope="function")
def test_client(db_session):
    """
    FastAPI TestClient bound to the test database.

    Not used as a context manager, so the lifespan (which creates tables in the
    configured database) does not run.
    """
    from fastapi.testclient import TestClient
    from betpool.main import app
    from betpool.core.database import get_db

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()

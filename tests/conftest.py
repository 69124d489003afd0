"""
Test Configuration and Fixtures
================================

Central configuration for pytest with all shared fixtures.

Features:
- SQLite in-memory database for testing
- TestClient setup
- Dependency override for the database session
- Incident factories and a small seeded data set
"""

import os
from datetime import datetime, timedelta, UTC
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

# Set testing environment before importing app modules
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from incident_tracker.core.config import Settings
from incident_tracker.db.base import Base
from incident_tracker.db.session import Database, get_db
from incident_tracker.models.incident import Incident
from incident_tracker.main import app as main_app


# =====================================
# Database Configuration
# =====================================

test_settings = Settings(
    ENVIRONMENT="testing",
    DATABASE_URL="sqlite:///:memory:",
)

# In-memory SQLite on a StaticPool: every session shares one connection
test_database = Database(test_settings)

BASE_TIME = datetime(2026, 1, 1, 12, 0, 0, tzinfo=UTC)


# =====================================
# Database Fixtures
# =====================================

@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before each test and drops them after.
    This ensures complete test isolation.

    Yields:
        SQLAlchemy Session object
    """
    Base.metadata.create_all(bind=test_database.engine)

    session = test_database.session()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_database.engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a TestClient with database dependency override.

    Args:
        db_session: Database session fixture

    Yields:
        TestClient instance
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    main_app.dependency_overrides[get_db] = override_get_db

    with TestClient(main_app) as test_client:
        yield test_client

    main_app.dependency_overrides.clear()


# =====================================
# Incident Fixtures
# =====================================

@pytest.fixture
def make_incident(db_session: Session) -> Callable[..., Incident]:
    """
    Factory inserting an incident directly into the store.

    Each call is stamped one minute after the previous one unless
    ``created_at`` is given.
    """
    counter = {"n": 0}

    def _make(**overrides) -> Incident:
        counter["n"] += 1
        created_at = overrides.pop(
            "created_at", BASE_TIME + timedelta(minutes=counter["n"])
        )
        values = {
            "title": f"Incident {counter['n']}",
            "service": "Backend",
            "severity": "SEV3",
            "status": "OPEN",
            "owner": None,
            "summary": None,
            "created_at": created_at,
            "updated_at": created_at,
        }
        values.update(overrides)
        incident = Incident(**values)
        db_session.add(incident)
        db_session.commit()
        return incident

    return _make


@pytest.fixture
def auth_incidents(make_incident) -> dict:
    """
    Two Auth incidents that differ in severity and summary.

    Returns:
        {"a": SEV1 incident, "b": SEV2 incident}
    """
    a = make_incident(
        title="Token refresh failing",
        service="Auth",
        severity="SEV1",
        summary="Refresh tokens rejected after key rotation",
    )
    b = make_incident(
        title="Slow login page",
        service="Auth",
        severity="SEV2",
        summary="Login form takes 4s to render",
    )
    return {"a": a, "b": b}


@pytest.fixture
def many_incidents(make_incident) -> list:
    """25 incidents across services, severities and statuses."""
    services = ["Auth", "Payments", "Backend", "Search", "Database"]
    severities = ["SEV1", "SEV2", "SEV3", "SEV4"]
    statuses = ["OPEN", "MITIGATED", "RESOLVED"]
    return [
        make_incident(
            title=f"{services[i % 5]} issue {i:02d}",
            service=services[i % 5],
            severity=severities[i % 4],
            status=statuses[i % 3],
            summary=f"Summary for incident number {i:02d}",
        )
        for i in range(25)
    ]


@pytest.fixture
def valid_payload() -> dict:
    """A complete, valid create payload."""
    return {
        "title": "Checkout returns 502",
        "service": "Payments",
        "severity": "SEV1",
        "status": "OPEN",
        "owner": "amy@team.com",
        "summary": "Upstream gateway timing out for card payments",
    }

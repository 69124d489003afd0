"""
Database Session Unit Tests
===========================

Tests for the Database handle and store error mapping.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from incident_tracker.core.config import Settings
from incident_tracker.core.exceptions import StoreError
from incident_tracker.db.session import Database, create_db_engine, store_operation


pytestmark = pytest.mark.unit


class TestDatabase:
    """Tests for the Database handle."""

    def test_in_memory_sqlite_shares_one_connection(self):
        database = Database(Settings(DATABASE_URL="sqlite:///:memory:"))
        try:
            first = database.session()
            first.execute(text("CREATE TABLE probe (x INTEGER)"))
            first.commit()
            first.close()

            second = database.session()
            second.execute(text("SELECT x FROM probe"))
            second.close()
        finally:
            database.dispose()

    def test_check_connection(self):
        database = Database(Settings(DATABASE_URL="sqlite:///:memory:"))
        try:
            assert database.check_connection() is True
        finally:
            database.dispose()

    def test_non_sqlite_engine_uses_pool_settings(self):
        engine = create_db_engine(
            Settings(DATABASE_URL="postgresql://u:p@localhost/incidents", DB_POOL_SIZE=3)
        )

        assert engine.pool.size() == 3


class TestStoreOperation:
    """Tests for SQLAlchemy error mapping."""

    def test_errors_become_store_error(self, db_session: Session):
        with pytest.raises(StoreError) as exc_info:
            with store_operation(db_session, "probe"):
                db_session.execute(text("SELECT * FROM missing_table"))

        assert exc_info.value.operation == "probe"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_other_errors_pass_through(self, db_session: Session):
        with pytest.raises(KeyError):
            with store_operation(db_session, "probe"):
                raise KeyError("x")

"""
Database Session Management Module
==================================

Responsible for:
- Creating the database engine with pool settings for the configured store
- Owning the session factory
- Providing the per-request session dependency for FastAPI routes
- Mapping persistence failures to StoreError

The ``Database`` object is constructed by the application factory and kept
on ``app.state``; handlers receive sessions through ``get_db`` rather than a
module-level engine.
"""

from contextlib import contextmanager
from typing import Generator, Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from incident_tracker.core.config import Settings
from incident_tracker.core.exceptions import StoreError
from incident_tracker.core.logging import get_logger

# Initialize logger
logger = get_logger(__name__)


# ==========================
# Engine Factory
# ==========================

def create_db_engine(settings: Settings) -> Engine:
    """
    Build an engine for ``settings.DATABASE_URL``.

    SQLite gets a thread-agnostic connection (a single shared one for
    in-memory URLs) with explicit BEGIN handling; every other backend
    gets a validated QueuePool.
    """
    if settings.is_sqlite:
        kwargs = {
            "connect_args": {"check_same_thread": False},
            "echo": settings.DEBUG,
        }
        if ":memory:" in settings.DATABASE_URL:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(settings.DATABASE_URL, **kwargs)
        _enable_sqlite_transactions(engine)
        return engine

    return create_engine(
        settings.DATABASE_URL,
        # Connection Pool Settings
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,  # Validate connections before use
        echo=settings.DEBUG,
    )


def _enable_sqlite_transactions(engine: Engine) -> None:
    """
    Make pysqlite emit BEGIN when SQLAlchemy starts a transaction.

    The driver otherwise only opens transactions before DML, so two
    SELECTs in one session would not share a read snapshot.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


# ==========================
# Database Handle
# ==========================

class Database:
    """
    Owns the engine, its connection pool and the session factory.

    Usage:
        database = Database(settings)
        db = database.session()
        try:
            ...
        finally:
            db.close()
    """

    def __init__(self, settings: Settings, engine: Optional[Engine] = None):
        self.engine = engine or create_db_engine(settings)
        self.session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,  # Access objects after commit
        )

    def session(self) -> Session:
        """Open a new session. The caller is responsible for closing it."""
        return self.session_factory()

    def check_connection(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()


# ==========================
# Dependency for FastAPI
# ==========================

def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a database session.

    Ensures:
    - Session is opened per request from the application's Database
    - Transactions are rolled back on error
    - Session is closed after the request completes

    Yields:
        SQLAlchemy Session object
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    except Exception as e:
        logger.error("database_session_error", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()


# ==========================
# Store Error Mapping
# ==========================

@contextmanager
def store_operation(db: Session, operation: str) -> Iterator[None]:
    """
    Run a block of store calls, mapping SQLAlchemy failures to StoreError.

    The session is rolled back so the request leaves no partial write.

    Usage:
        with store_operation(db, "create_incident"):
            db.add(incident)
            db.commit()
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            "store_operation_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise StoreError(operation) from e

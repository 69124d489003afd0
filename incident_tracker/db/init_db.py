from incident_tracker.db.base import Base
from incident_tracker.db.session import Database

# Import models so they are registered with Base.metadata
from incident_tracker import models  # noqa: F401


def init_db(database: Database) -> None:
    """
    Create all tables (development only).
    In production, apply the Alembic migrations instead.
    """
    Base.metadata.create_all(bind=database.engine)

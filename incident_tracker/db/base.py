"""
Declarative Base
================

Every ORM model inherits from ``Base``; ``Base.metadata`` is what
``init_db`` and the Alembic environment build the schema from.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import declarative_base

# Constraint names stay stable across SQLite batch migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

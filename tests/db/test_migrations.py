"""
Migration Tests
===============

Applies the Alembic revisions to a scratch SQLite file and checks the
result against the ORM metadata.
"""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from incident_tracker.db.base import Base


pytestmark = pytest.mark.integration

PROJECT_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def migration_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    engine.dispose()


def run_alembic(engine, action, revision: str) -> None:
    config = Config(str(PROJECT_ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        action(config, revision)


class TestMigrations:
    """Tests for the incidents schema revisions."""

    def test_upgrade_matches_models(self, migration_engine):
        # Act
        run_alembic(migration_engine, command.upgrade, "head")

        # Assert
        inspector = inspect(migration_engine)
        model_table = Base.metadata.tables["incidents"]

        assert "incidents" in inspector.get_table_names()

        columns = {column["name"]: column for column in inspector.get_columns("incidents")}
        assert set(columns) == set(model_table.columns.keys())
        for column in model_table.columns:
            assert columns[column.name]["nullable"] == column.nullable, column.name

        assert inspector.get_pk_constraint("incidents")["constrained_columns"] == ["id"]

        indexes = {index["name"]: index["column_names"] for index in inspector.get_indexes("incidents")}
        assert indexes == {
            index.name: [column.name for column in index.columns]
            for index in model_table.indexes
        }

    def test_downgrade_removes_table(self, migration_engine):
        # Arrange
        run_alembic(migration_engine, command.upgrade, "head")

        # Act
        run_alembic(migration_engine, command.downgrade, "base")

        # Assert
        assert "incidents" not in inspect(migration_engine).get_table_names()

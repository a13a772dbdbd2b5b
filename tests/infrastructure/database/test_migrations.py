"""Tests for the programmatic Alembic setup."""

from __future__ import annotations

from pathlib import Path

from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from roperty.infrastructure.database.engine import create_db_engine, sqlite_url
from roperty.infrastructure.database.migrations import build_config, stamp_head


class TestMigrations:
    def test_single_baseline_head(self, db_url: str) -> None:
        script = ScriptDirectory.from_config(build_config(db_url))
        assert script.get_current_head() == "001_baseline"

    def test_stamp_head(self, db_url: str, db_engine: Engine) -> None:
        stamp_head(db_url)
        engine = create_db_engine(db_url)
        try:
            with engine.connect() as conn:
                assert MigrationContext.configure(conn).get_current_revision() == "001_baseline"
        finally:
            engine.dispose()

    def test_upgrade_creates_tables_on_empty_database(self, tmp_path: Path) -> None:
        from alembic import command

        url = sqlite_url(tmp_path / "empty.db")
        command.upgrade(build_config(url), "head")
        engine = create_db_engine(url)
        try:
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {"base_property", "domain_property", "alembic_version"} <= tables

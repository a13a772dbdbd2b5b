"""Shared pytest fixtures for roperty tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from roperty.domain.codec import LEGACY_AXES
from roperty.infrastructure.database.engine import init_database, sqlite_url
from roperty.infrastructure.persistence import SqlPersistence
from roperty.plugins.hookspecs import hookimpl
from roperty.services.store import PropertyStore

CONTAINER = "shop"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return sqlite_url(tmp_path / ".roperty" / "roperty.db")


@pytest.fixture
def db_engine(db_url: str) -> Iterator[Engine]:
    """Initialized SQLite engine with the property tables created."""
    engine = init_database(db_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def persistence(db_engine: Engine) -> SqlPersistence:
    return SqlPersistence(db_engine, CONTAINER, change_user="tests")


@pytest.fixture
def store(persistence: SqlPersistence) -> PropertyStore:
    """Store over the legacy axes, backed by a fresh SQLite database."""
    return PropertyStore(persistence, LEGACY_AXES, name="test-store")


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI inside an empty temp directory.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command
    test classes.
    """
    monkeypatch.delenv("ROPERTY_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


class RecordingPlugin:
    """Plugin that records every hook call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    @hookimpl
    def post_set(self, key: str, value: Any, domains: list[str]) -> None:
        self.calls.append(("post_set", {"key": key, "value": value, "domains": domains}))

    @hookimpl
    def post_reload(self, key_count: int) -> None:
        self.calls.append(("post_reload", {"key_count": key_count}))

    @hookimpl
    def store_registered(self, name: str, domains: list[str]) -> None:
        self.calls.append(("store_registered", {"name": name, "domains": domains}))


@pytest.fixture
def recorder() -> RecordingPlugin:
    return RecordingPlugin()

"""Database engine setup.

SQLite is the default backend: WAL mode lets readers proceed while a
writer stores a property, and foreign keys keep override rows tied to
their base row. Any other SQLAlchemy URL is used as-is.

SQLAlchemy Core (not ORM) is used because properties are loaded in bulk
into memory; there is no benefit from session management or identity maps.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from roperty.infrastructure.database.schema import metadata


def sqlite_url(db_path: Path) -> str:
    """SQLAlchemy URL for a SQLite file."""
    return f"sqlite:///{db_path}"


def create_db_engine(url: str) -> Engine:
    """Create an engine; SQLite connections get WAL mode and foreign keys."""
    engine = create_engine(url, echo=False)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(url: str) -> Engine:
    """Create the property tables if they do not exist yet.

    For SQLite file URLs the parent directory is created as well.
    Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    if url.startswith("sqlite:///") and url != "sqlite:///:memory:":
        Path(url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(url)
    metadata.create_all(engine)
    return engine

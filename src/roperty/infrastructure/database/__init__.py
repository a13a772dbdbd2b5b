"""Property database engine, schema, and migrations via SQLAlchemy Core."""

from roperty.infrastructure.database.engine import create_db_engine, init_database, sqlite_url
from roperty.infrastructure.database.schema import base_property, domain_property, metadata

__all__ = [
    "base_property",
    "create_db_engine",
    "domain_property",
    "init_database",
    "metadata",
    "sqlite_url",
]

"""SQLAlchemy Core table definitions for the property database.

Two tables, matching the layout existing property databases use:

- ``base_property``: one row per (property_name, container_name) with the
  default value, description, and value type (``converter_class``).
- ``domain_property``: one row per override, keyed by the encoded domain
  descriptor (``LOCALE_de_DE`` ...) and the owning base row.

Both carry versioning/audit columns maintained by the persistence layer.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)

metadata = MetaData()

base_property = Table(
    "base_property",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("property_name", String(255), nullable=False),
    Column("converter_class", String(255)),  # value type name, NULL = string
    Column("converter_config", String(255)),
    Column("description", String(1000)),
    Column("default_value", Text),
    Column("inheritance_type", String(255)),
    Column("container_name", String(255), nullable=False),
    Column("last_changed", DateTime),
    Column("change_user", String(255)),
    Column("version", BigInteger, nullable=False, default=0, server_default="0"),
    Column("app_version", String(30)),
    Column("ctime", DateTime, server_default=func.current_timestamp()),
    UniqueConstraint("property_name", "container_name"),
)

domain_property = Table(
    "domain_property",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "base_property",
        Integer,
        ForeignKey("base_property.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("domain", String(255), nullable=False),  # encoded descriptor
    Column("overridden_value", Text),
    Column("last_changed", DateTime),
    Column("change_user", String(255)),
    Column("version", BigInteger, nullable=False, default=0, server_default="0"),
    Column("app_version", String(30)),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_base_property_container", base_property.c.container_name)
Index("ix_domain_property_base", domain_property.c.base_property)

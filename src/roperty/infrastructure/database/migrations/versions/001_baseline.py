"""Baseline schema — base_property and domain_property.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-09-28

Databases created by ``roperty init`` are stamped at this revision
without running it; existing legacy databases that already hold both
tables are stamped by ``roperty upgrade`` as well.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "base_property",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("property_name", sa.String(255), nullable=False),
        sa.Column("converter_class", sa.String(255)),
        sa.Column("converter_config", sa.String(255)),
        sa.Column("description", sa.String(1000)),
        sa.Column("default_value", sa.Text),
        sa.Column("inheritance_type", sa.String(255)),
        sa.Column("container_name", sa.String(255), nullable=False),
        sa.Column("last_changed", sa.DateTime),
        sa.Column("change_user", sa.String(255)),
        sa.Column("version", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("app_version", sa.String(30)),
        sa.Column("ctime", sa.DateTime, server_default=sa.func.current_timestamp()),
        sa.UniqueConstraint("property_name", "container_name"),
    )
    op.create_index("ix_base_property_container", "base_property", ["container_name"])

    op.create_table(
        "domain_property",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "base_property",
            sa.Integer,
            sa.ForeignKey("base_property.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("domain", sa.String(255), nullable=False),
        sa.Column("overridden_value", sa.Text),
        sa.Column("last_changed", sa.DateTime),
        sa.Column("change_user", sa.String(255)),
        sa.Column("version", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("app_version", sa.String(30)),
    )
    op.create_index("ix_domain_property_base", "domain_property", ["base_property"])


def downgrade() -> None:
    op.drop_index("ix_domain_property_base", table_name="domain_property")
    op.drop_table("domain_property")
    op.drop_index("ix_base_property_container", table_name="base_property")
    op.drop_table("base_property")

"""Command: bring the property database schema up to date."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    cls=RopertyCommand,
    examples="""\
  roperty upgrade
  roperty upgrade --check
  roperty upgrade --stamp
  roperty -c legacy/roperty.toml --json upgrade""",
)
@click.option(
    "--check", "mode", flag_value="check", help="List pending migrations without applying them."
)
@click.option(
    "--stamp",
    "mode",
    flag_value="stamp",
    help="Mark existing property tables as current without migrating.",
)
@click.pass_obj
def upgrade(app: AppContext, mode: str | None) -> None:
    """Migrate the base_property / domain_property schema.

    A SQLite database file is copied into a ``backups/`` directory next
    to it before any migration runs.
    """
    from roperty.services.upgrade import UpgradeService

    svc = UpgradeService(app.engine, app.settings.db_url)
    if mode == "check":
        result = svc.check_pending()
    elif mode == "stamp":
        result = svc.stamp_current()
    else:
        result = svc.apply()
    meta = {**(result.meta or {}), "database": app.settings.db_url}
    app.emit(result.model_copy(update={"meta": meta}))

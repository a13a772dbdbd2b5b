"""Command: project initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand
from roperty.domain.codec import LEGACY_AXES

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    "init",
    cls=RopertyCommand,
    examples="""\
  roperty init
  roperty init ./shop --container shop
  roperty init . --domain region --domain tenant
  roperty init --db-url postgresql://props@db/props --force""",
)
@click.argument("path", required=False, default=".")
@click.option("--container", default="container", show_default=True, help="Container name.")
@click.option(
    "--domain",
    "domains",
    multiple=True,
    help="Axis name in priority order (repeatable; default: legacy axes).",
)
@click.option("--db-url", default=None, help="SQLAlchemy URL instead of the local SQLite file.")
@click.option("--force", is_flag=True, help="Overwrite an existing roperty.toml.")
@click.pass_obj
def init_cmd(
    app: AppContext,
    path: str,
    container: str,
    domains: tuple[str, ...],
    db_url: str | None,
    force: bool,
) -> None:
    """Create roperty.toml and the property database in PATH."""
    from roperty.services.init import InitService

    app.emit(
        InitService.init_project(
            Path(path).resolve(),
            container=container,
            domains=domains or LEGACY_AXES,
            db_url=db_url,
            force=force,
        )
    )

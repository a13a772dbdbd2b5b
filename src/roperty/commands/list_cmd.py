"""Command: list all properties (named list_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    "list",
    cls=RopertyCommand,
    examples="""\
  roperty list
  roperty -v list
  roperty -q list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List every property of the configured container."""
    from roperty.services.properties import PropertyService

    app.emit(PropertyService(app.store).list_properties())

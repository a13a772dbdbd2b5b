"""Command: show one property with all its overrides."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    cls=RopertyCommand,
    examples="""\
  roperty show greeting
  roperty --json show greeting""",
)
@click.argument("key")
@click.pass_obj
def show(app: AppContext, key: str) -> None:
    """Show the default, description, and overrides of KEY."""
    from roperty.services.properties import PropertyService

    app.emit(PropertyService(app.store).show(key))

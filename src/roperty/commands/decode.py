"""Command: decode a legacy domain descriptor."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    cls=RopertyCommand,
    examples="""\
  roperty decode LOCALE_de_DE
  roperty decode PARTNER_103_de_AT --container shop""",
)
@click.argument("descriptor")
@click.option("--container", default=None, help="Container name (default: from config).")
@click.pass_obj
def decode(app: AppContext, descriptor: str, container: str | None) -> None:
    """Show the domain vector a DESCRIPTOR stands for."""
    from roperty.services.properties import PropertyService

    app.emit(PropertyService.decode(descriptor, container or app.settings.store.container))

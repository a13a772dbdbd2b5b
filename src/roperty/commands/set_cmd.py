"""Command: set a default value or a domain override."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand
from roperty.domain.values import ValueType

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


@click.command(
    "set",
    cls=RopertyCommand,
    examples="""\
  roperty set greeting Hello --description "Landing page greeting"
  roperty set greeting Hallo -d container -d DE
  roperty set greeting Servus -d container -d AT -d de_AT
  roperty set max.items 50 --descriptor PARTNER_103_de_AT --type integer""",
)
@click.argument("key")
@click.argument("value")
@click.option(
    "-d",
    "--domain",
    "domains",
    multiple=True,
    help="Domain value in axis order; '*' matches anything (repeatable).",
)
@click.option("--descriptor", default=None, help="Legacy domain descriptor, e.g. LOCALE_de_DE.")
@click.option("--description", default=None, help="Human-readable description.")
@click.option(
    "--type",
    "value_type",
    type=click.Choice([t.value for t in ValueType]),
    default=None,
    help="Value type (default: the property's current type, else string).",
)
@click.pass_obj
def set_cmd(
    app: AppContext,
    key: str,
    value: str,
    domains: tuple[str, ...],
    descriptor: str | None,
    description: str | None,
    value_type: str | None,
) -> None:
    """Set VALUE for KEY, as default or for the given domains."""
    from roperty.services.properties import PropertyService

    app.emit(
        PropertyService(app.store).set_value(
            key,
            value,
            domains=domains,
            descriptor=descriptor,
            container=app.settings.store.container,
            description=description,
            value_type=value_type,
        )
    )

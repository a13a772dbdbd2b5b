"""Command: resolve a property for given domain values."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.commands._base import RopertyCommand
from roperty.domain.resolver import parse_assignments
from roperty.domain.values import ValueType

if TYPE_CHECKING:
    from roperty.commands._context import AppContext


def _parse_where(
    _ctx: click.Context, _param: click.Parameter, value: tuple[str, ...]
) -> dict[str, str]:
    try:
        return parse_assignments(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.command(
    cls=RopertyCommand,
    examples="""\
  roperty get checkout.timeout
  roperty get greeting -w country=DE -w language=de_DE
  roperty get max.items -w partner=103 --type integer
  roperty -q get banner.text --default "Welcome\"""",
)
@click.argument("key")
@click.option(
    "-w",
    "--where",
    "axes",
    multiple=True,
    callback=_parse_where,
    metavar="AXIS=VALUE",
    help="Current domain value (repeatable).",
)
@click.option(
    "--type",
    "value_type",
    type=click.Choice([t.value for t in ValueType]),
    default=None,
    help="Convert the result to this type.",
)
@click.option("--default", "default", default=None, help="Returned when nothing is defined.")
@click.pass_obj
def get(
    app: AppContext,
    key: str,
    axes: dict[str, str],
    value_type: str | None,
    default: str | None,
) -> None:
    """Resolve KEY for the given domain values."""
    from roperty.services.properties import PropertyService

    app.emit(
        PropertyService(app.store).get_value(
            key, axes, default=default, value_type=value_type
        )
    )

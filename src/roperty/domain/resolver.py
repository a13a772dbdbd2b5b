"""Resolver capability — the caller's current value for each domain axis."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class DomainResolver(Protocol):
    """Supplies the current value of a named axis, or None when unknown."""

    def get_domain_value(self, axis: str) -> str | None: ...


class MappingResolver:
    """Resolver backed by a plain ``axis -> value`` mapping.

    Examples:
        >>> MappingResolver({"country": "DE"}).get_domain_value("country")
        'DE'
        >>> MappingResolver({}).get_domain_value("locale") is None
        True
    """

    def __init__(self, values: Mapping[str, str] | None = None, **axes: str) -> None:
        self._values: dict[str, str] = {**(values or {}), **axes}

    def get_domain_value(self, axis: str) -> str | None:
        return self._values.get(axis)

    def __repr__(self) -> str:
        return f"MappingResolver({self._values!r})"


NULL_RESOLVER = MappingResolver()


def parse_assignments(pairs: list[str] | tuple[str, ...]) -> dict[str, str]:
    """Parse ``axis=value`` strings into a mapping.

    Raises:
        ValueError: If an entry has no ``=`` or an empty axis name.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        axis, sep, value = pair.partition("=")
        axis = axis.strip()
        if not sep or not axis:
            msg = f"Expected axis=value, got {pair!r}"
            raise ValueError(msg)
        result[axis] = value.strip()
    return result

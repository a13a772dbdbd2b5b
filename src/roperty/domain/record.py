"""PropertyRecord — one key's default value plus its domain overrides.

Resolution picks, among the overrides whose vector matches the
resolver, the one with the highest precedence:

1. Most constrained slots (specificity).
2. Constrained at the earliest axis where two candidates differ.
3. First inserted.

No override matching means the default is returned.

INVARIANT: resolve() never takes a lock. Writers build a new overrides
tuple under the record's lock and publish it with a single assignment,
so a reader always sees one consistent snapshot.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from roperty.domain.values import ValueType, coerce, infer_value_type
from roperty.domain.vector import DomainVector

if TYPE_CHECKING:
    from roperty.domain.resolver import DomainResolver


@dataclass(frozen=True)
class Override:
    """A value that applies only where its vector matches."""

    vector: DomainVector
    value: Any


def as_vector(domains: Sequence[str | DomainVector]) -> DomainVector:
    """Normalize put-style domain arguments into a single vector.

    Accepts either one prebuilt :class:`DomainVector` or plain domain
    values, where ``"*"`` is a wildcard.
    """
    if len(domains) == 1 and isinstance(domains[0], DomainVector):
        return domains[0]
    values: list[str] = []
    for domain in domains:
        if isinstance(domain, DomainVector):
            msg = "A DomainVector must be the only domain argument"
            raise TypeError(msg)
        values.append(domain)
    return DomainVector.from_values(values)


class PropertyRecord:
    """Default value and ordered overrides for a single property key."""

    def __init__(
        self,
        default: Any = None,
        *,
        description: str | None = None,
        value_type: ValueType | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._default = default
        self._overrides: tuple[Override, ...] = ()
        self.description = description
        self._value_type = value_type

    @property
    def default(self) -> Any:
        return self._default

    @property
    def overrides(self) -> tuple[Override, ...]:
        """Snapshot of the overrides in insertion order."""
        return self._overrides

    @property
    def value_type(self) -> ValueType:
        """Declared type, or the type inferred from the first stored value."""
        return self._held_type() or ValueType.STRING

    def put(self, value: Any, *domains: str | DomainVector) -> None:
        """Set the default (no domains) or upsert an override.

        An override whose vector equals an existing one replaces that
        value in place; otherwise it is appended. Values are not checked
        against the record's type; see :meth:`update`.
        """
        vector = as_vector(domains)
        with self._lock:
            self._put(value, vector)

    def update(
        self,
        value: Any,
        vector: DomainVector,
        *,
        description: str | None = None,
        value_type: ValueType | None = None,
    ) -> None:
        """Typed write: retype, describe and put in one locked step.

        The record's type is *value_type* when given, else the type it
        already holds, else the type of *value*. Existing values are
        converted to that type. The record is left untouched when any
        value does not fit.

        Raises:
            TypeMismatch: If *value* or an existing value cannot be
                represented as the record's type.
        """
        with self._lock:
            target = value_type or self._held_type() or infer_value_type(value)
            converted = coerce(value, target)
            default = converted if vector.is_empty else coerce(self._default, target)
            overrides = tuple(
                Override(
                    override.vector,
                    converted if override.vector == vector else coerce(override.value, target),
                )
                for override in self._overrides
            )

            self._default = default
            self._overrides = overrides
            if value_type is not None:
                self._value_type = value_type
            if description is not None:
                self.description = description
            if not vector.is_empty:
                self._put(converted, vector)

    def get_override(self, vector: DomainVector) -> Override | None:
        """The override stored for exactly *vector*, if any."""
        for override in self._overrides:
            if override.vector == vector:
                return override
        return None

    def best_match(self, axes: Sequence[str], resolver: DomainResolver) -> Override | None:
        """The highest-precedence override matching *resolver*, or None."""
        width = len(axes)
        best: Override | None = None
        best_key: tuple[int, tuple[bool, ...]] | None = None
        for override in self._overrides:
            if not override.vector.matches(axes, resolver):
                continue
            key = override.vector.precedence(width)
            # Strictly greater keeps the earlier insertion on ties.
            if best_key is None or key > best_key:
                best, best_key = override, key
        return best

    def resolve(self, axes: Sequence[str], resolver: DomainResolver) -> Any:
        """Value for the current domain values, falling back to the default."""
        match = self.best_match(axes, resolver)
        if match is None:
            return self._default
        return match.value

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view for introspection and CLI output."""
        return {
            "default": self._default,
            "description": self.description,
            "type": self.value_type.value,
            "overrides": [
                {"domains": override.vector.to_values(), "value": override.value}
                for override in self._overrides
            ],
        }

    def _held_type(self) -> ValueType | None:
        if self._value_type is not None:
            return self._value_type
        if self._default is not None:
            return infer_value_type(self._default)
        for override in self._overrides:
            if override.value is not None:
                return infer_value_type(override.value)
        return None

    def _put(self, value: Any, vector: DomainVector) -> None:
        if vector.is_empty:
            self._default = value
            return
        updated = list(self._overrides)
        for index, existing in enumerate(updated):
            if existing.vector == vector:
                updated[index] = Override(vector, value)
                break
        else:
            updated.append(Override(vector, value))
        self._overrides = tuple(updated)

    def __repr__(self) -> str:
        return (
            f"PropertyRecord(default={self._default!r}, "
            f"description={self.description!r}, overrides={len(self._overrides)})"
        )

    def __str__(self) -> str:
        lines = [f"default={self._default!r}"]
        for override in self._overrides:
            lines.append(f"  [{override.vector}] -> {override.value!r}")
        return "\n".join(lines)

"""Domain vectors — ordered per-axis patterns for override matching.

A vector holds one slot per axis, in axis-list order. Each slot is
constrained to a concrete value, a wildcard, or unaddressed. A vector
addresses a contiguous prefix of the axis list: once a slot is
unaddressed, every later slot is unaddressed too.

Only the addressed prefix is stored. Positions past it read as
unaddressed, so vectors built before an axis was appended stay valid.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from roperty.domain.resolver import DomainResolver

WILDCARD_TOKEN = "*"


class SlotKind(StrEnum):
    """How a vector position participates in matching."""

    CONSTRAINED = "constrained"
    WILDCARD = "wildcard"
    UNADDRESSED = "unaddressed"


@dataclass(frozen=True)
class Slot:
    """A single axis position of a domain vector."""

    kind: SlotKind
    value: str | None = None

    def __post_init__(self) -> None:
        if self.kind is SlotKind.CONSTRAINED and self.value is None:
            msg = "A constrained slot needs a value"
            raise ValueError(msg)
        if self.kind is not SlotKind.CONSTRAINED and self.value is not None:
            msg = f"A {self.kind} slot carries no value"
            raise ValueError(msg)

    @classmethod
    def constrained(cls, value: str) -> Slot:
        return cls(SlotKind.CONSTRAINED, value)

    @property
    def is_constrained(self) -> bool:
        return self.kind is SlotKind.CONSTRAINED

    @property
    def is_addressed(self) -> bool:
        return self.kind is not SlotKind.UNADDRESSED

    def accepts(self, actual: str | None) -> bool:
        """Whether *actual* (the resolver's value) satisfies this slot."""
        if self.kind is SlotKind.CONSTRAINED:
            return actual is not None and actual == self.value
        return True

    def __str__(self) -> str:
        if self.kind is SlotKind.CONSTRAINED:
            return str(self.value)
        if self.kind is SlotKind.WILDCARD:
            return WILDCARD_TOKEN
        return "-"


WILDCARD = Slot(SlotKind.WILDCARD)
UNADDRESSED = Slot(SlotKind.UNADDRESSED)


@dataclass(frozen=True, init=False)
class DomainVector:
    """Immutable pattern over the ordered domain axes.

    Equality and hashing are structural over the addressed prefix;
    trailing unaddressed slots are dropped at construction.

    INVARIANT: no unaddressed slot precedes an addressed one.
    """

    slots: tuple[Slot, ...]

    def __init__(self, slots: Iterable[Slot] = ()) -> None:
        items = list(slots)
        while items and not items[-1].is_addressed:
            items.pop()
        for position, slot in enumerate(items):
            if not slot.is_addressed:
                msg = (
                    f"Unaddressed slot at position {position} is followed by an "
                    "addressed slot; vectors must address a contiguous prefix"
                )
                raise ValueError(msg)
        object.__setattr__(self, "slots", tuple(items))

    EMPTY: ClassVar[DomainVector]

    @classmethod
    def from_values(cls, values: Iterable[str]) -> DomainVector:
        """Build a vector from plain domain values.

        ``"*"`` marks a wildcard position, every other value constrains
        its axis.

        Examples:
            >>> DomainVector.from_values(["shop", "*", "de_DE"]).to_values()
            ['shop', '*', 'de_DE']
        """
        slots: list[Slot] = []
        for value in values:
            if value == WILDCARD_TOKEN:
                slots.append(WILDCARD)
            else:
                slots.append(Slot.constrained(value))
        return cls(slots)

    def to_values(self) -> list[str]:
        """Inverse of :meth:`from_values`."""
        return [str(slot) for slot in self.slots]

    @property
    def length(self) -> int:
        """Number of addressed axis positions."""
        return len(self.slots)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    def slot(self, position: int) -> Slot:
        """Slot at *position*; positions past the addressed prefix are unaddressed."""
        if position < len(self.slots):
            return self.slots[position]
        return UNADDRESSED

    def matches(self, axes: Sequence[str], resolver: DomainResolver) -> bool:
        """Whether every constrained slot equals the resolver's value for its axis.

        Wildcard slots always match. A vector addressing more positions
        than there are axes cannot be evaluated and never matches.
        """
        if len(self.slots) > len(axes):
            return False
        for axis, slot in zip(axes, self.slots, strict=False):
            if slot.is_constrained and not slot.accepts(resolver.get_domain_value(axis)):
                return False
        return True

    def specificity(self) -> int:
        """Count of constrained slots. Wildcards do not add specificity."""
        return sum(1 for slot in self.slots if slot.is_constrained)

    def precedence(self, width: int) -> tuple[int, tuple[bool, ...]]:
        """Sort key for choosing among matching overrides.

        Higher specificity first; on a tie, the vector constrained at the
        earliest axis where the two differ. *width* pads the layout so
        vectors of different lengths compare position by position.
        """
        width = max(width, len(self.slots))
        layout = tuple(self.slot(position).is_constrained for position in range(width))
        return self.specificity(), layout

    def __str__(self) -> str:
        return "|".join(self.to_values())


DomainVector.EMPTY = DomainVector()

"""Error taxonomy for property resolution and persistence.

A non-matching override is a boolean outcome, never an exception.
These types cover malformed input, conversion failures, and a
degraded persistence backend.
"""

from __future__ import annotations


class RopertyError(Exception):
    """Base class for all roperty errors."""


class MalformedDomainKey(RopertyError, ValueError):
    """An encoded domain descriptor (or vector) has no legacy spelling."""

    def __init__(self, descriptor: str, reason: str) -> None:
        super().__init__(f"Malformed domain key {descriptor!r}: {reason}")
        self.descriptor = descriptor
        self.reason = reason


class TypeMismatch(RopertyError, TypeError):
    """A value cannot be converted to the type the caller asked for."""

    def __init__(self, value: object, expected: str) -> None:
        super().__init__(f"Cannot convert {value!r} to {expected}")
        self.value = value
        self.expected = expected


class PersistenceUnavailable(RopertyError):
    """The persistence backend failed to load or store a property."""

    def __init__(self, operation: str, key: str | None = None) -> None:
        target = f" for key {key!r}" if key is not None else ""
        super().__init__(f"Persistence {operation} failed{target}")
        self.operation = operation
        self.key = key

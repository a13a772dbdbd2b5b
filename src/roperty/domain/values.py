"""Property value types and text conversion.

Values live in memory as plain Python objects. The relational store
keeps them as text, with the property's type recorded alongside, so
conversion happens only at the persistence boundary and when a caller
asks for a specific type.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from roperty.domain.errors import TypeMismatch

_TRUE_WORDS = frozenset({"true", "yes", "1", "t", "y", "on"})
_FALSE_WORDS = frozenset({"false", "no", "0", "f", "n", "off"})


class ValueType(StrEnum):
    """Supported property value types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    JSON = "json"
    LIST = "list"


_PYTHON_TYPES: dict[type, ValueType] = {
    str: ValueType.STRING,
    int: ValueType.INTEGER,
    float: ValueType.FLOAT,
    bool: ValueType.BOOLEAN,
    dict: ValueType.JSON,
    list: ValueType.LIST,
}


def as_value_type(kind: ValueType | str | type | None) -> ValueType | None:
    """Normalize a type given as enum, name, or Python type."""
    if kind is None or isinstance(kind, ValueType):
        return kind
    if isinstance(kind, type):
        try:
            return _PYTHON_TYPES[kind]
        except KeyError:
            msg = f"Unsupported value type: {kind.__name__}"
            raise ValueError(msg) from None
    try:
        return ValueType(kind.lower())
    except ValueError:
        msg = f"Unknown value type {kind!r}. Expected one of {[t.value for t in ValueType]}"
        raise ValueError(msg) from None


def infer_value_type(value: Any) -> ValueType:
    """Pick the type a new property should be stored as."""
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, int):
        return ValueType.INTEGER
    if isinstance(value, float):
        return ValueType.FLOAT
    if isinstance(value, (list, tuple)):
        return ValueType.LIST
    if isinstance(value, dict):
        return ValueType.JSON
    return ValueType.STRING


def to_storage(value: Any, value_type: ValueType) -> str | None:
    """Render *value* as text for a storage column."""
    if value is None:
        return None
    if value_type is ValueType.BOOLEAN:
        return str(bool(value)).lower()
    if value_type in (ValueType.JSON, ValueType.LIST):
        if value_type is ValueType.LIST and isinstance(value, tuple):
            value = list(value)
        return json.dumps(value)
    return str(value)


def from_storage(text: str | None, value_type: ValueType) -> Any:
    """Parse a storage column back into a typed value.

    Legacy list columns may be comma-separated rather than JSON; both
    spellings are accepted.

    Raises:
        TypeMismatch: If *text* is not a valid spelling of *value_type*.
    """
    if text is None:
        return None
    try:
        if value_type is ValueType.STRING:
            return text
        if value_type is ValueType.INTEGER:
            return int(text)
        if value_type is ValueType.FLOAT:
            return float(text)
        if value_type is ValueType.BOOLEAN:
            return _parse_bool(text)
        if value_type is ValueType.JSON:
            return json.loads(text)
        if value_type is ValueType.LIST:
            return _parse_list(text)
    except ValueError as exc:
        raise TypeMismatch(text, value_type.value) from exc
    return text


def coerce(value: Any, value_type: ValueType) -> Any:
    """Convert a resolved value to the type the caller asked for.

    Values already of the right type pass through; strings are parsed
    with the storage rules. Anything else is a mismatch.

    Raises:
        TypeMismatch: If *value* cannot be represented as *value_type*.
    """
    if value is None:
        return None
    if value_type is ValueType.STRING:
        if isinstance(value, str):
            return value
        raise TypeMismatch(value, value_type.value)
    if value_type is ValueType.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif value_type is ValueType.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif value_type is ValueType.BOOLEAN:
        if isinstance(value, bool):
            return value
    elif value_type is ValueType.JSON:
        if isinstance(value, (dict, list)):
            return value
    elif value_type is ValueType.LIST:
        if isinstance(value, (list, tuple)):
            return list(value)
    if isinstance(value, str):
        return from_storage(value, value_type)
    raise TypeMismatch(value, value_type.value)


def _parse_bool(text: str) -> bool:
    word = text.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"not a boolean: {text!r}"
    raise ValueError(msg)


def _parse_list(text: str) -> list[Any]:
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        parsed = json.loads(stripped)
        if not isinstance(parsed, list):
            msg = f"not a list: {text!r}"
            raise ValueError(msg)
        return parsed
    return [item.strip() for item in stripped.split(",")]

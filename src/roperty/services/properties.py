"""PropertyService — CLI-facing property operations.

Wraps :class:`PropertyStore` calls into :class:`ServiceResult` so the
command layer only formats and routes output. Raw CLI values arrive as
text and are parsed with the property's value type.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from roperty.domain.codec import LEGACY_AXES, decode_domain_key
from roperty.domain.errors import PersistenceUnavailable, RopertyError
from roperty.domain.resolver import MappingResolver
from roperty.domain.values import ValueType, as_value_type, from_storage
from roperty.domain.vector import DomainVector
from roperty.services.base import BaseService
from roperty.services.result import ServiceResult


class PropertyService(BaseService):
    """Get, set, and inspect properties of one store."""

    def get_value(
        self,
        key: str,
        axes: Mapping[str, str] | None = None,
        *,
        default: str | None = None,
        value_type: str | None = None,
    ) -> ServiceResult:
        """Resolve *key* for the given ``axis -> value`` assignments."""
        op = "get"
        resolver = MappingResolver(axes or {})
        try:
            requested = as_value_type(value_type)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", str(exc))

        record = self._store.find(key)
        if record is None and default is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No property named {key!r}", key=key)

        try:
            value = self._store.get(key, resolver, default, as_type=requested)
        except RopertyError as exc:
            return self._error_result(op, exc)

        match = None if record is None else record.best_match(self._store.domains, resolver)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "key": key,
                "value": value,
                "matched": None if match is None else match.vector.to_values(),
                "source": _source(record, match),
            },
        )

    def set_value(
        self,
        key: str,
        raw_value: str,
        *,
        domains: Sequence[str] = (),
        descriptor: str | None = None,
        container: str | None = None,
        description: str | None = None,
        value_type: str | None = None,
    ) -> ServiceResult:
        """Parse *raw_value* and set it as default or domain override.

        Domains come either as plain values (``"*"`` = wildcard) or as a
        single legacy *descriptor* decoded against *container*.
        """
        op = "set"
        if domains and descriptor:
            return ServiceResult.failure(
                op, "INVALID_INPUT", "Pass either domain values or a descriptor, not both"
            )

        existing = self._store.find(key)
        try:
            requested = as_value_type(value_type)
        except ValueError as exc:
            return ServiceResult.failure(op, "INVALID_INPUT", str(exc))
        if requested is None:
            requested = existing.value_type if existing is not None else ValueType.STRING

        try:
            if descriptor:
                vector = decode_domain_key(descriptor, container or "")
            else:
                vector = DomainVector.from_values(domains)
            value = from_storage(raw_value, requested)
        except RopertyError as exc:
            return self._error_result(op, exc)

        warnings: list[str] = []
        if existing is not None and value_type is not None and existing.value_type != requested:
            warnings.append(
                f"Type of {key!r} changed from {existing.value_type.value} to {requested.value}"
            )
        try:
            record = self._store.set(
                key, value, vector, description=description, value_type=requested
            )
        except PersistenceUnavailable as exc:
            result = self._error_result(op, exc)
            if exc.operation == "store":
                warnings.append("In-memory value was updated but not stored")
            return result.model_copy(update={"warnings": warnings})
        except RopertyError as exc:
            return self._error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "key": key,
                "value": value,
                "domains": vector.to_values(),
                "created": existing is None,
                "overrides": len(record.overrides),
            },
            warnings=warnings,
        )

    def show(self, key: str) -> ServiceResult:
        """Full record: default, description, type, and overrides."""
        op = "show"
        record = self._store.find(key)
        if record is None:
            return ServiceResult.failure(op, "NOT_FOUND", f"No property named {key!r}", key=key)
        return ServiceResult(
            ok=True,
            op=op,
            data={"key": key, "domains": list(self._store.domains), **record.to_dict()},
        )

    def list_properties(self) -> ServiceResult:
        """Summary row per property held by the store."""
        snapshot = self._store.describe()
        items: list[dict[str, Any]] = []
        for key, record in snapshot["properties"].items():
            items.append(
                {
                    "key": key,
                    "default": record["default"],
                    "type": record["type"],
                    "overrides": len(record["overrides"]),
                    "description": record["description"],
                }
            )
        return ServiceResult(
            ok=True,
            op="list",
            data={"count": len(items), "items": items},
            meta={"store": snapshot["name"], "domains": snapshot["domains"]},
        )

    @staticmethod
    def decode(descriptor: str, container: str) -> ServiceResult:
        """Decode a legacy descriptor and show the resulting vector."""
        op = "decode"
        try:
            vector = decode_domain_key(descriptor, container)
        except RopertyError as exc:
            return BaseService._error_result(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "descriptor": descriptor,
                "values": vector.to_values(),
                "axes": dict(zip(LEGACY_AXES, vector.to_values(), strict=False)),
                "specificity": vector.specificity(),
            },
        )


def _source(record: Any, match: Any) -> str:
    if record is None:
        return "caller-default"
    if match is None:
        return "default"
    return "override"

"""Persistence capability and its relational implementation.

The store facade only needs three operations — load one key, load all
keys, store one key — so any backend satisfying :class:`Persistence`
can sit behind it. :class:`SqlPersistence` maps records onto the
``base_property`` / ``domain_property`` tables of one container.

INVARIANT: a malformed override row is logged and skipped; it never
aborts loading the rest of the property or the other keys.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from roperty.domain.codec import decode_domain_key, encode_domain_key
from roperty.domain.errors import MalformedDomainKey, PersistenceUnavailable, TypeMismatch
from roperty.domain.record import PropertyRecord
from roperty.domain.values import ValueType, as_value_type, from_storage, to_storage
from roperty.infrastructure.database.schema import base_property, domain_property

if TYPE_CHECKING:
    from sqlalchemy import Connection, Row
    from sqlalchemy.engine import Engine

    from roperty.domain.vector import DomainVector

logger = logging.getLogger(__name__)


class Persistence(Protocol):
    """Load/store capability consumed by the store facade."""

    def load(self, key: str) -> PropertyRecord | None:
        """Load one property, or None if it is not stored."""
        ...

    def load_all(self) -> dict[str, PropertyRecord]:
        """Load every stored property."""
        ...

    def store(self, key: str, record: PropertyRecord) -> None:
        """Write one property with all of its overrides."""
        ...

    def validate(self, vector: DomainVector) -> None:
        """Raise MalformedDomainKey if *vector* cannot be stored."""
        ...


class SqlPersistence:
    """SQLAlchemy Core persistence for the properties of one container.

    Parameters:
        engine: Engine with the property tables created.
        container: Container name; scopes base rows and fills the
            container slot of decoded descriptors.
        change_user: Recorded in the audit columns on store.
    """

    def __init__(
        self,
        engine: Engine,
        container: str,
        *,
        change_user: str | None = None,
    ) -> None:
        if not container:
            msg = "container must not be empty"
            raise ValueError(msg)
        self._engine = engine
        self._container = container
        self._change_user = change_user

    @property
    def container(self) -> str:
        return self._container

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, key: str) -> PropertyRecord | None:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    select(base_property).where(
                        base_property.c.property_name == key,
                        base_property.c.container_name == self._container,
                    )
                ).first()
                if row is None:
                    return None
                overrides = conn.execute(
                    select(domain_property.c.domain, domain_property.c.overridden_value)
                    .where(domain_property.c.base_property == row.id)
                    .order_by(domain_property.c.id)
                ).fetchall()
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable("load", key) from exc
        return self._build_record(row, overrides)

    def load_all(self) -> dict[str, PropertyRecord]:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(base_property)
                    .where(base_property.c.container_name == self._container)
                    .order_by(base_property.c.id)
                ).fetchall()
                override_rows = conn.execute(
                    select(
                        domain_property.c.base_property,
                        domain_property.c.domain,
                        domain_property.c.overridden_value,
                    )
                    .join(base_property, domain_property.c.base_property == base_property.c.id)
                    .where(base_property.c.container_name == self._container)
                    .order_by(domain_property.c.id)
                ).fetchall()
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable("load_all") from exc

        by_base: dict[int, list[Row[Any]]] = {}
        for override_row in override_rows:
            by_base.setdefault(override_row.base_property, []).append(override_row)

        records: dict[str, PropertyRecord] = {}
        for row in rows:
            records[row.property_name] = self._build_record(row, by_base.get(row.id, []))
        logger.debug("Loaded %d properties for container %s", len(records), self._container)
        return records

    def validate(self, vector: DomainVector) -> None:
        encode_domain_key(vector, self._container)

    def store(self, key: str, record: PropertyRecord) -> None:
        """Upsert the base row and replace its override rows atomically.

        Raises:
            MalformedDomainKey: If an override has no legacy descriptor;
                nothing is written in that case.
            PersistenceUnavailable: If the database write fails.
        """
        value_type = record.value_type
        encoded = [
            (encode_domain_key(override.vector, self._container), override.value)
            for override in record.overrides
        ]
        audit = {
            "last_changed": datetime.now(UTC).replace(tzinfo=None),
            "change_user": self._change_user,
            "app_version": _app_version(),
        }
        try:
            with self._engine.begin() as conn:
                base_id = self._upsert_base(conn, key, record, value_type, audit)
                conn.execute(
                    delete(domain_property).where(domain_property.c.base_property == base_id)
                )
                for descriptor, value in encoded:
                    conn.execute(
                        insert(domain_property).values(
                            base_property=base_id,
                            domain=descriptor,
                            overridden_value=to_storage(value, value_type),
                            **audit,
                        )
                    )
        except SQLAlchemyError as exc:
            raise PersistenceUnavailable("store", key) from exc
        logger.debug("Stored property %s with %d overrides", key, len(encoded))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _upsert_base(
        self,
        conn: Connection,
        key: str,
        record: PropertyRecord,
        value_type: ValueType,
        audit: dict[str, Any],
    ) -> int:
        values = {
            "default_value": to_storage(record.default, value_type),
            "description": record.description,
            "converter_class": None if value_type is ValueType.STRING else value_type.value,
            **audit,
        }
        existing = conn.execute(
            select(base_property.c.id, base_property.c.version).where(
                base_property.c.property_name == key,
                base_property.c.container_name == self._container,
            )
        ).first()
        if existing is None:
            result = conn.execute(
                insert(base_property).values(
                    property_name=key,
                    container_name=self._container,
                    version=0,
                    **values,
                )
            )
            if result.inserted_primary_key is None:
                raise PersistenceUnavailable("store", key)
            return int(result.inserted_primary_key[0])

        conn.execute(
            update(base_property)
            .where(base_property.c.id == existing.id)
            .values(version=(existing.version or 0) + 1, **values)
        )
        return int(existing.id)

    def _build_record(self, row: Row[Any], overrides: list[Row[Any]]) -> PropertyRecord:
        value_type = self._value_type(row)
        record = PropertyRecord(
            description=row.description,
            value_type=None if row.converter_class is None else value_type,
        )
        try:
            record.put(from_storage(row.default_value, value_type))
        except TypeMismatch:
            logger.warning(
                "Default of %s is not a valid %s; keeping raw text",
                row.property_name,
                value_type.value,
            )
            record.put(row.default_value)

        for override in overrides:
            try:
                vector = decode_domain_key(override.domain, self._container)
                value = from_storage(override.overridden_value, value_type)
            except (MalformedDomainKey, TypeMismatch) as exc:
                logger.warning("Skipping override of %s: %s", row.property_name, exc)
                continue
            record.put(value, vector)
        return record

    @staticmethod
    def _value_type(row: Row[Any]) -> ValueType:
        if row.converter_class is None:
            return ValueType.STRING
        try:
            resolved = as_value_type(row.converter_class)
        except ValueError:
            logger.warning(
                "Unknown converter %r for %s; treating values as strings",
                row.converter_class,
                row.property_name,
            )
            return ValueType.STRING
        return resolved or ValueType.STRING


def _app_version() -> str:
    from roperty import __version__

    return __version__

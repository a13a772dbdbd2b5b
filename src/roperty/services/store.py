"""PropertyStore — facade over the key -> PropertyRecord map.

Owns the ordered axis list, loads records from persistence on a miss,
creates records on first write, and stores every write back.

Concurrency model:

- Reads never lock. ``get`` works on whatever map and record snapshot
  it sees when it starts.
- The first record published for a key goes through one mutex-guarded
  get-or-insert, so concurrent first writers (or a writer racing a
  loader) all end up sharing a single record object.
- ``reload`` / ``set_records`` swap the whole map in one assignment.

Persistence failures:

- on read (``get``) they are logged and the in-memory state (or the
  caller's default) is used;
- on write (``set``) a failed load is raised before anything changes;
  a failed store is raised after the in-memory record is updated.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from roperty.domain.errors import PersistenceUnavailable
from roperty.domain.record import PropertyRecord, as_vector
from roperty.domain.resolver import NULL_RESOLVER
from roperty.domain.values import ValueType, as_value_type, coerce

if TYPE_CHECKING:
    from roperty.domain.resolver import DomainResolver
    from roperty.domain.vector import DomainVector
    from roperty.infrastructure.persistence import Persistence
    from roperty.plugins.manager import PluginManager
    from roperty.services.registry import StoreRegistry

logger = logging.getLogger(__name__)

_store_ids = itertools.count(1)


class PropertyStore:
    """Domain-aware property lookup with lazy persistence loading.

    Parameters:
        persistence: Optional load/store backend. When given, every
            stored property is loaded at construction.
        domains: Initial axis names, in priority order.
        registry: Monitoring registry this store registers with.
        plugin_manager: Receives ``post_set`` / ``post_reload`` hooks.
        name: Name shown in the registry (generated if omitted).
    """

    def __init__(
        self,
        persistence: Persistence | None = None,
        domains: Iterable[str] = (),
        *,
        registry: StoreRegistry | None = None,
        plugin_manager: PluginManager | None = None,
        name: str | None = None,
    ) -> None:
        self.name = name or f"store-{next(_store_ids)}"
        self._domains: tuple[str, ...] = ()
        self._domains_lock = threading.Lock()
        self._create_lock = threading.Lock()
        self._records: dict[str, PropertyRecord] = {}
        self._persistence = persistence
        self._registry = registry
        self._pm = plugin_manager

        for domain in domains:
            self.add_domain(domain)

        if persistence is not None:
            try:
                self._records = persistence.load_all()
            except PersistenceUnavailable:
                logger.warning(
                    "Initial load failed for %s; starting empty", self.name, exc_info=True
                )

        if registry is not None:
            registry.register(self)

    # ------------------------------------------------------------------
    # Axes
    # ------------------------------------------------------------------

    @property
    def domains(self) -> tuple[str, ...]:
        """Snapshot of the axis names, in priority order."""
        return self._domains

    def add_domain(self, domain: str) -> PropertyStore:
        """Append an axis. Returns self for chaining."""
        if not domain:
            msg = "domain must not be empty"
            raise ValueError(msg)
        with self._domains_lock:
            self._domains = (*self._domains, domain)
        return self

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(
        self,
        key: str,
        resolver: DomainResolver = NULL_RESOLVER,
        default: Any = None,
        *,
        as_type: ValueType | str | type | None = None,
    ) -> Any:
        """Resolve *key* for the resolver's current domain values.

        Returns *default* when the key is unknown or resolves to None.
        With *as_type*, the result is converted (TypeMismatch on failure).
        """
        record = self.find(key)
        result = None if record is None else record.resolve(self._domains, resolver)
        if result is None:
            result = default
        logger.debug(
            "Getting value for key %r with default %r: returning %r", key, default, result
        )
        value_type = as_value_type(as_type)
        if value_type is not None:
            return coerce(result, value_type)
        return result

    def get_or_define(
        self,
        key: str,
        default: Any,
        resolver: DomainResolver = NULL_RESOLVER,
        description: str | None = None,
    ) -> Any:
        """Resolve *key*; when nothing is defined, store *default* and return it."""
        value = self.get(key, resolver)
        if value is not None:
            return value
        self.set(key, default, description=description)
        return default

    def find(self, key: str, *, strict: bool = False) -> PropertyRecord | None:
        """The record for *key*, loading it from persistence on a miss.

        A failed load is logged and treated as a miss, unless *strict*,
        in which case PersistenceUnavailable propagates.
        """
        record = self._records.get(key)
        if record is not None:
            return record
        loaded = self._load(key, strict=strict)
        if loaded is None:
            return None
        return self._publish(key, loaded)

    def record(self, key: str) -> PropertyRecord | None:
        """The in-memory record for *key* (never loads)."""
        return self._records.get(key)

    def keys(self) -> list[str]:
        return sorted(self._records)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(
        self,
        key: str,
        value: Any,
        *domains: str | DomainVector,
        description: str | None = None,
        value_type: ValueType | None = None,
    ) -> PropertyRecord:
        """Set the default (no domains) or a domain override, then store it.

        *description* and *value_type*, when given, replace the record's.
        A record is only created when persistence reports the key absent.

        Raises:
            PersistenceUnavailable: Loading failed (memory untouched), or
                storing failed (memory is updated).
            MalformedDomainKey: The backend cannot spell the override's
                domains; memory is untouched.
            TypeMismatch: The value does not fit the record's type;
                memory is untouched.
        """
        vector = as_vector(domains)
        logger.debug("Storing value %r for key %r with domains %s", value, key, vector)
        record = self.find(key, strict=True)
        if self._persistence is not None and not vector.is_empty:
            self._persistence.validate(vector)

        if record is None:
            fresh = PropertyRecord(description=description, value_type=value_type)
            fresh.update(value, vector)
            record = self._publish(key, fresh)
            if record is not fresh:
                record.update(value, vector, description=description, value_type=value_type)
        else:
            record.update(value, vector, description=description, value_type=value_type)

        if self._persistence is not None:
            self._persistence.store(key, record)
        if self._pm is not None:
            self._pm.dispatch("post_set", key=key, value=value, domains=vector.to_values())
        return record

    def set_records(self, records: Mapping[str, PropertyRecord]) -> None:
        """Replace the whole key map in a single reference swap."""
        self._records = dict(records)

    def set_persistence(self, persistence: Persistence) -> None:
        """Use a different backend from now on (does not reload)."""
        self._persistence = persistence
        if self._registry is not None:
            self._registry.register(self)

    def reload(self) -> int:
        """Load every property from persistence and swap the map in.

        Returns the number of keys loaded (0 without persistence).

        Raises:
            PersistenceUnavailable: If loading fails; the old map stays.
        """
        if self._persistence is None:
            return 0
        records = self._persistence.load_all()
        self.set_records(records)
        logger.info("Reloaded %d properties into %s", len(records), self.name)
        if self._pm is not None:
            self._pm.dispatch("post_reload", key_count=len(records))
        return len(records)

    def close(self) -> None:
        """Deregister from the monitoring registry."""
        if self._registry is not None:
            self._registry.deregister(self)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def describe(self) -> dict[str, Any]:
        """Snapshot of axes and every record, for monitoring and the CLI."""
        records = self._records
        return {
            "name": self.name,
            "domains": list(self._domains),
            "properties": {key: records[key].to_dict() for key in sorted(records)},
        }

    def __str__(self) -> str:
        lines = [f"PropertyStore{{name={self.name}, domains={list(self._domains)}"]
        for key, record in sorted(self._records.items()):
            lines.append(f'Record for "{key}": {record}')
        lines.append("}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self, key: str, *, strict: bool = False) -> PropertyRecord | None:
        if self._persistence is None:
            return None
        try:
            return self._persistence.load(key)
        except PersistenceUnavailable:
            if strict:
                raise
            logger.warning("Loading %r failed; using in-memory state", key, exc_info=True)
            return None

    def _publish(self, key: str, record: PropertyRecord) -> PropertyRecord:
        """Insert *record* unless one exists; return whichever is published."""
        with self._create_lock:
            return self._records.setdefault(key, record)

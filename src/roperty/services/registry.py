"""StoreRegistry — explicit monitoring registry of live property stores.

Operators introspect live values through a registry object that is
handed to each store at construction. Lifecycle:

- a store registers when it is created (and again when its
  persistence is replaced);
- a store deregisters on ``close()``.

There is no module-level registry; whoever wires the stores owns one.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from roperty.plugins.manager import PluginManager
    from roperty.services.store import PropertyStore

logger = logging.getLogger(__name__)


class StoreRegistry:
    """Thread-safe set of named, live :class:`PropertyStore` instances."""

    def __init__(self, *, plugin_manager: PluginManager | None = None) -> None:
        self._lock = threading.Lock()
        self._stores: dict[str, PropertyStore] = {}
        self._pm = plugin_manager

    def register(self, store: PropertyStore) -> str:
        """Add (or re-add) *store* under its name. Returns the name."""
        name = store.name
        with self._lock:
            current = self._stores.get(name)
            if current is not None and current is not store:
                msg = f"Another store is already registered as {name!r}"
                raise ValueError(msg)
            self._stores[name] = store
        logger.debug("Registered store %s", name)
        if self._pm is not None:
            self._pm.dispatch("store_registered", name=name, domains=list(store.domains))
        return name

    def deregister(self, store: PropertyStore) -> bool:
        """Remove *store*. Returns False if it was not registered."""
        with self._lock:
            if self._stores.get(store.name) is not store:
                return False
            del self._stores[store.name]
        logger.debug("Deregistered store %s", store.name)
        return True

    def get(self, name: str) -> PropertyStore | None:
        with self._lock:
            return self._stores.get(name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._stores)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Live introspection view of every registered store."""
        with self._lock:
            stores = list(self._stores.items())
        return {name: store.describe() for name, store in sorted(stores)}

    def __contains__(self, store: object) -> bool:
        with self._lock:
            return any(registered is store for registered in self._stores.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)

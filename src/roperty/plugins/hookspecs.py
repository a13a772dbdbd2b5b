"""Pluggy hook specifications for property store events.

Hooks run synchronously after the store operation completes.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("roperty")
hookimpl = pluggy.HookimplMarker("roperty")


class RopertyHookSpec:
    """Hook specifications for the roperty plugin system."""

    @hookspec
    def post_set(self, key: str, value: Any, domains: list[str]) -> None:
        """Called after a value was set (and stored, if persistence succeeded)."""

    @hookspec
    def post_reload(self, key_count: int) -> None:
        """Called after the store swapped in a freshly loaded key map."""

    @hookspec
    def store_registered(self, name: str, domains: list[str]) -> None:
        """Called when a store registers with a monitoring registry."""

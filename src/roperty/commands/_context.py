"""AppContext — shared Click context for all commands.

Created once by the root group and handed to subcommands through
``@click.pass_obj``. The engine, plugins, and store are built on first
use so ``--help`` and ``decode`` never touch the database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from roperty.config.logging import configure_logging
from roperty.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from roperty.config.settings import RopertySettings
    from roperty.plugins.manager import PluginManager
    from roperty.services.registry import StoreRegistry
    from roperty.services.result import ServiceResult
    from roperty.services.store import PropertyStore


class AppContext:
    """Settings plus lazily created runtime objects for one invocation."""

    def __init__(self, settings: RopertySettings) -> None:
        self.settings = settings
        self._engine: Engine | None = None
        self._plugin_manager: PluginManager | None = None
        self._registry: StoreRegistry | None = None
        self._store: PropertyStore | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            from roperty.infrastructure.database.engine import init_database

            self._engine = init_database(self.settings.db_url)
        return self._engine

    @property
    def plugin_manager(self) -> PluginManager:
        if self._plugin_manager is None:
            from roperty.plugins.manager import PluginManager

            self._plugin_manager = PluginManager()
            self._plugin_manager.discover_and_load()
        return self._plugin_manager

    @property
    def registry(self) -> StoreRegistry:
        if self._registry is None:
            from roperty.services.registry import StoreRegistry

            self._registry = StoreRegistry(plugin_manager=self.plugin_manager)
        return self._registry

    @property
    def store(self) -> PropertyStore:
        """Store backed by the configured database and container."""
        if self._store is None:
            from roperty.infrastructure.persistence import SqlPersistence
            from roperty.services.store import PropertyStore

            cfg = self.settings.store
            persistence = SqlPersistence(
                self.engine,
                cfg.container,
                change_user=self.settings.database.change_user,
            )
            self._store = PropertyStore(
                persistence,
                cfg.domains,
                registry=self.registry,
                plugin_manager=self.plugin_manager,
                name=cfg.name,
            )
        return self._store

    def close(self) -> None:
        """Deregister the store and release database connections."""
        if self._store is not None:
            self._store.close()
        if self._engine is not None:
            self._engine.dispose()

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; failures go to stderr and exit with code 1.

        Warnings of a successful result go to stderr so piped output
        stays clean (in JSON mode they are part of the payload).
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

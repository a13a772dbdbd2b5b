"""InitService — scaffold ``roperty.toml`` and the property database."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from roperty.config.discovery import CONFIG_FILENAME
from roperty.config.models import DatabaseConfig
from roperty.infrastructure.database.engine import init_database, sqlite_url
from roperty.infrastructure.database.migrations import stamp_head
from roperty.services.result import ServiceResult

logger = logging.getLogger(__name__)


def render_config(container: str, domains: Sequence[str], *, db_url: str | None = None) -> str:
    """TOML text for a new project (sparse: only the chosen values)."""
    lines = [
        "[store]",
        f"container = {json.dumps(container)}",
        f"domains = [{', '.join(json.dumps(d) for d in domains)}]",
    ]
    if db_url:
        lines += ["", "[database]", f"url = {json.dumps(db_url)}"]
    return "\n".join(lines) + "\n"


class InitService:
    """Creates a new roperty project directory."""

    @staticmethod
    def init_project(
        root: Path,
        *,
        container: str,
        domains: Sequence[str],
        db_url: str | None = None,
        force: bool = False,
    ) -> ServiceResult:
        """Write ``roperty.toml``, create the tables, stamp the schema head."""
        op = "init"
        if not container:
            return ServiceResult.failure(op, "INVALID_INPUT", "container must not be empty")
        if any(not d for d in domains):
            return ServiceResult.failure(op, "INVALID_INPUT", "domain names must not be empty")

        config_path = root / CONFIG_FILENAME
        if config_path.exists() and not force:
            return ServiceResult.failure(
                op,
                "ALREADY_INITIALIZED",
                f"{config_path} already exists (use --force to overwrite)",
                config_path=str(config_path),
            )

        url = db_url or sqlite_url(root / DatabaseConfig().path)
        try:
            root.mkdir(parents=True, exist_ok=True)
            config_path.write_text(
                render_config(container, domains, db_url=db_url), encoding="utf-8"
            )
        except OSError as exc:
            return ServiceResult.failure(op, "INIT_FAILED", f"Cannot write config: {exc}")

        try:
            engine = init_database(url)
            engine.dispose()
            stamp_head(url)
        except (SQLAlchemyError, CommandError) as exc:
            return ServiceResult.failure(op, "INIT_FAILED", f"Cannot create database: {exc}")

        logger.info("Initialized roperty project at %s", root)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "config_path": str(config_path),
                "db_url": url,
                "container": container,
                "domains": list(domains),
            },
        )

"""UpgradeService — property database migration with Alembic.

Pipeline: BACKUP → MIGRATE → VALIDATE → REPORT

Backups are only taken for SQLite file databases; other backends are
expected to be backed up by their operators.
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from roperty.infrastructure.database.migrations import build_config
from roperty.services.result import ServiceResult

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_PROPERTY_TABLES = ("base_property", "domain_property")
BACKUP_KEEP = 5


class UpgradeService:
    """Checks and applies schema migrations for one property database."""

    def __init__(self, engine: Engine, db_url: str) -> None:
        self._engine = engine
        self._db_url = db_url

    def _tables_exist(self) -> bool:
        """Whether the property tables predate Alembic version tracking."""
        names = set(inspect(self._engine).get_table_names())
        return all(table in names for table in _PROPERTY_TABLES)

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"

        try:
            cfg = build_config(self._db_url)
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            # Walk from head down to the current revision
            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev = script.get_revision(head)
                while rev is not None and rev.revision != current:
                    pending.append({"revision": rev.revision, "description": rev.doc or ""})
                    down = rev.down_revision
                    if down is None:
                        break
                    rev = script.get_revision(str(down))
        except (SQLAlchemyError, CommandError) as exc:
            return ServiceResult.failure(op, "CHECK_FAILED", f"Failed to check migrations: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def apply(self) -> ServiceResult:
        """BACKUP → MIGRATE → VALIDATE → REPORT."""
        op = "upgrade"
        warnings: list[str] = []

        check = self.check_pending()
        if not check.ok:
            return check

        pending_count = check.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check.data["head"],
                    "message": "Database is already up to date",
                },
            )

        # BACKUP
        try:
            backup_path = self._backup_db()
        except OSError as exc:
            return ServiceResult.failure(op, "BACKUP_FAILED", f"Backup failed: {exc}")

        # MIGRATE, or STAMP a database created before version tracking
        try:
            cfg = build_config(self._db_url)
            if check.data["current"] is None and self._tables_exist():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except (SQLAlchemyError, CommandError) as exc:
            return ServiceResult.failure(
                op,
                "MIGRATION_FAILED",
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=None if backup_path is None else str(backup_path),
            )

        # VALIDATE
        if not self._tables_exist():
            warnings.append("Property tables are missing after migration")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "applied_count": pending_count,
                "current": check.data["head"],
                "backup_path": None if backup_path is None else str(backup_path),
            },
            warnings=warnings,
        )

    def stamp_current(self) -> ServiceResult:
        """Stamp the database as at the current head (fresh databases)."""
        op = "upgrade"
        try:
            cfg = build_config(self._db_url)
            command.stamp(cfg, "head")
            head = ScriptDirectory.from_config(cfg).get_current_head()
        except (SQLAlchemyError, CommandError) as exc:
            return ServiceResult.failure(op, "STAMP_FAILED", f"Failed to stamp database: {exc}")
        return ServiceResult(ok=True, op=op, data={"stamped": True, "current": head})

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def _db_path(self) -> Path | None:
        url = self._engine.url
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        return Path(url.database)

    def _backup_db(self) -> Path | None:
        """Timestamped copy of a SQLite database file, or None."""
        db_path = self._db_path()
        if db_path is None or not db_path.is_file():
            return None
        backup_dir = db_path.parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S%f")
        backup_path = backup_dir / f"{db_path.stem}-{timestamp}{db_path.suffix}"
        shutil.copy2(db_path, backup_path)
        logger.info("Backed up %s to %s", db_path, backup_path)
        self._prune_backups(backup_dir, db_path)
        return backup_path

    @staticmethod
    def _prune_backups(backup_dir: Path, db_path: Path) -> None:
        backups = sorted(backup_dir.glob(f"{db_path.stem}-*{db_path.suffix}"))
        for old in backups[: max(len(backups) - BACKUP_KEEP, 0)]:
            old.unlink(missing_ok=True)

"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, roperty.toml only contains
overrides. A fresh project needs only ``[store] container``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from roperty.domain.codec import LEGACY_AXES


class StoreConfig(BaseModel):
    """[store] section."""

    model_config = {"frozen": True}

    domains: list[str] = Field(default_factory=lambda: list(LEGACY_AXES))
    container: str = "container"
    name: str | None = None

    @field_validator("domains")
    @classmethod
    def _no_empty_axes(cls, value: list[str]) -> list[str]:
        if any(not axis for axis in value):
            msg = "domain names must not be empty"
            raise ValueError(msg)
        return value


class DatabaseConfig(BaseModel):
    """[database] section.

    ``url`` wins over ``path``; a relative ``path`` is resolved against
    the project root.
    """

    model_config = {"frozen": True}

    path: Path = Path(".roperty") / "roperty.db"
    url: str | None = None
    change_user: str | None = None

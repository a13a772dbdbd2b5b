"""Tests for roperty.toml walk-up discovery."""

from __future__ import annotations

from pathlib import Path

import pytest

from roperty.config.discovery import CONFIG_ENV_VAR, find_config


class TestFindConfig:
    @pytest.fixture(autouse=True)
    def _no_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)

    def test_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / "roperty.toml").write_text("")
        assert find_config(tmp_path) == tmp_path / "roperty.toml"

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / "roperty.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == (tmp_path / "roperty.toml").resolve()

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text("")
        (tmp_path / "roperty.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))
        assert find_config(tmp_path) == custom

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None

"""Tests for fetchgen.config -- generator config, data dir, atomic writes."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from fetchgen.config import (
    DEFAULT_CONFIG_PATH,
    atomic_write,
    get_data_dir,
    load_generator_config,
)
from fetchgen.exceptions import ConfigError
from fetchgen.models import DEFAULT_IGNORE_PATH_PARAMETERS, GeneratorConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_json(path: Path, data: Any) -> None:
    """Write a dict as JSON to *path*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Generator config
# ---------------------------------------------------------------------------


class TestLoadGeneratorConfig:
    """Loading ``fetchgen.config.json``."""

    def test_missing_default_file_gives_defaults(self, isolated_dir: Path) -> None:
        config = load_generator_config()
        assert config == GeneratorConfig()
        assert config.ignore_path_parameters == DEFAULT_IGNORE_PATH_PARAMETERS

    def test_missing_explicit_file_raises(self, isolated_dir: Path) -> None:
        with pytest.raises(ConfigError, match="Config file not found"):
            load_generator_config("other.json", explicit=True)

    def test_default_file_read(self, isolated_dir: Path) -> None:
        _write_json(
            isolated_dir / DEFAULT_CONFIG_PATH,
            {
                "ignorePathParameters": ["tenantId"],
                "tags": {"example.cart": {"ignorePathParameters": []}},
            },
        )
        config = load_generator_config()
        assert config.ignore_path_parameters == ["tenantId"]
        assert config.ignored_path_parameters(["example.cart"]) == []
        assert config.ignored_path_parameters(["Order"]) == ["tenantId"]

    def test_yaml_content(self, isolated_dir: Path) -> None:
        path = isolated_dir / "fetchgen.yaml"
        path.write_text("ignorePathParameters:\n  - ownerId\n", encoding="utf-8")
        config = load_generator_config(str(path), explicit=True)
        assert config.ignore_path_parameters == ["ownerId"]

    def test_empty_file_gives_defaults(self, isolated_dir: Path) -> None:
        (isolated_dir / DEFAULT_CONFIG_PATH).write_text("  \n", encoding="utf-8")
        assert load_generator_config() == GeneratorConfig()

    def test_invalid_content_raises(self, isolated_dir: Path) -> None:
        (isolated_dir / DEFAULT_CONFIG_PATH).write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_generator_config()

    def test_unknown_field_raises(self, isolated_dir: Path) -> None:
        _write_json(isolated_dir / DEFAULT_CONFIG_PATH, {"ignorePathParams": []})
        with pytest.raises(ConfigError, match="Invalid config at"):
            load_generator_config()

    def test_wrong_type_raises(self, isolated_dir: Path) -> None:
        _write_json(isolated_dir / DEFAULT_CONFIG_PATH, {"ignorePathParameters": "tenantId"})
        with pytest.raises(ConfigError):
            load_generator_config()


class TestIgnoredPathParameters:
    """Per-tag resolution of the ignore list."""

    def test_first_tag_override_wins(self) -> None:
        config = GeneratorConfig.model_validate(
            {
                "tags": {
                    "a": {"ignorePathParameters": ["x"]},
                    "b": {"ignorePathParameters": ["y"]},
                }
            }
        )
        assert config.ignored_path_parameters(["b", "a"]) == ["y"]

    def test_tag_without_override_falls_through(self) -> None:
        config = GeneratorConfig.model_validate({"tags": {"a": {}}})
        assert config.ignored_path_parameters(["a"]) == DEFAULT_IGNORE_PATH_PARAMETERS


# ---------------------------------------------------------------------------
# Data directory
# ---------------------------------------------------------------------------


class TestDataDir:
    """Crash-log directory resolution."""

    def test_xdg_data_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchgen.config._is_xdg_platform", lambda: True)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        path = get_data_dir()
        assert path == tmp_path / "data" / "fetchgen"
        assert path.is_dir()

    def test_non_xdg_platform(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("fetchgen.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_data_dir() == tmp_path / ".fetchgen" / "logs"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    """Temp-file-and-rename writes."""

    def test_creates_parents_and_writes(self, tmp_path: Path) -> None:
        target = tmp_path / "out" / "example" / "types.ts"
        atomic_write(target, "export {};\n")
        assert target.read_text(encoding="utf-8") == "export {};\n"

    def test_overwrites(self, tmp_path: Path) -> None:
        target = tmp_path / "index.ts"
        target.write_text("old", encoding="utf-8")
        atomic_write(target, "new")
        assert target.read_text(encoding="utf-8") == "new"

    def test_temp_file_removed_on_failure(self, tmp_path: Path) -> None:
        target = tmp_path / "index.ts"
        with patch("fetchgen.config.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                atomic_write(target, "data")
        assert list(tmp_path.iterdir()) == []

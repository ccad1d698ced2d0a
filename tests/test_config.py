"""Tests for Config."""

from __future__ import annotations

from pathlib import Path

import pytest

from verloader.config import Config
from verloader.errors import ConfigError, ConfigNotFoundError


class TestGet:
    def test_dot_path(self) -> None:
        config = Config({"loader": {"extension": ".src", "install": False}})
        assert config.get("loader.extension") == ".src"
        assert config.get("loader.install") is False

    def test_missing_key_returns_default(self) -> None:
        config = Config({"loader": {}})
        assert config.get("loader.extension") is None
        assert config.get("loader.extension", ".py") == ".py"
        assert config.get("other.key", 3) == 3

    def test_non_mapping_in_path_returns_default(self) -> None:
        config = Config({"loader": "flat"})
        assert config.get("loader.extension", "d") == "d"

    def test_empty_config(self) -> None:
        assert Config().get("loader.install", True) is True


class TestFromYaml:
    def test_loads_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "loader.yaml"
        path.write_text("loader:\n  extension: .src\n  manifest: namespaces.yaml\n")
        config = Config.from_yaml(path)
        assert config.get("loader.extension") == ".src"
        assert config.get("loader.manifest") == "namespaces.yaml"
        assert config.source == path

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "loader.yaml"
        path.write_text("")
        assert Config.from_yaml(path).get("loader.extension") is None

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            Config.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "loader.yaml"
        path.write_text("{{invalid yaml:")
        with pytest.raises(ConfigError):
            Config.from_yaml(path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "loader.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="YAML mapping"):
            Config.from_yaml(path)

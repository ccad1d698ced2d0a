"""Configuration loading and access."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from verloader.errors import ConfigError, ConfigNotFoundError

__all__ = ["Config", "DEFAULT_EXTENSION"]

DEFAULT_EXTENSION = ".py"


class Config:
    """Configuration accessor with dot-path key support.

    Recognised keys:

    - ``loader.extension``: source file suffix looked up by resolvers (``.py``).
    - ``loader.install``: whether a registry attaches its resolvers to
      ``sys.meta_path`` on creation (``True``).
    - ``loader.manifest``: optional path of a namespace manifest to load.
    """

    def __init__(self, data: dict[str, Any] | None = None, source: Path | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self.source = source

    @classmethod
    def from_yaml(cls, path: str | Path) -> Config:
        """Load configuration from a YAML file.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigError: If the file is not a valid YAML mapping.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigNotFoundError(config_path=str(config_path))

        content = config_path.read_text(encoding="utf-8")
        try:
            parsed = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in configuration file: {config_path}", cause=e) from e

        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ConfigError(message=f"Configuration file must be a YAML mapping: {config_path}")
        return cls(parsed, source=config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

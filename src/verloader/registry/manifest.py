"""Namespace manifest loading for bulk registration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from verloader.errors import ConfigError, ConfigNotFoundError

logger = logging.getLogger(__name__)

__all__ = ["ManifestEntry", "load_manifest", "parse_manifest"]


class ManifestEntry(BaseModel):
    """One namespace registration as declared in a manifest."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    namespace: str
    version: str
    base_dir: str

    @field_validator("version", mode="before")
    @classmethod
    def _reject_numeric_version(cls, value: Any) -> Any:
        # YAML reads `version: 1.10` as the float 1.1
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            raise ValueError(f"version must be a string, got {value!r}; quote it in YAML (version: \"1.10\")")
        return value

    def resolved(self, root: Path) -> ManifestEntry:
        """Return a copy whose relative ``base_dir`` is anchored at ``root``."""
        base = Path(self.base_dir)
        if base.is_absolute():
            return self
        return self.model_copy(update={"base_dir": str(root / base)})


def parse_manifest(data: Any, source: str = "<manifest>") -> list[ManifestEntry]:
    """Validate a parsed manifest document and return its entries.

    Raises:
        ConfigError: If the document or any entry is invalid.
    """
    if not isinstance(data, dict) or "namespaces" not in data:
        raise ConfigError(message=f"Manifest must contain a 'namespaces' list: {source}")

    raw_entries = data["namespaces"]
    if raw_entries is None:
        return []
    if not isinstance(raw_entries, list):
        raise ConfigError(message=f"Manifest must contain a 'namespaces' list: {source}")

    entries: list[ManifestEntry] = []
    for index, raw in enumerate(raw_entries):
        try:
            entries.append(ManifestEntry.model_validate(raw))
        except ValidationError as e:
            first = e.errors(include_url=False)[0]["msg"]
            raise ConfigError(
                message=f"Invalid manifest entry #{index} in {source}: {e.error_count()} validation error(s): {first}",
                details={"index": index, "errors": e.errors(include_url=False)},
                cause=e,
            ) from e
    return entries


def load_manifest(manifest_path: str | Path) -> list[ManifestEntry]:
    """Load a namespace manifest YAML file.

    Relative ``base_dir`` values are resolved against the manifest's own
    directory.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML or fails validation.
    """
    path = Path(manifest_path)
    if not path.exists():
        raise ConfigNotFoundError(config_path=str(path))

    content = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in manifest file: {path}", cause=e) from e

    entries = parse_manifest(parsed, source=str(path))
    root = path.resolve().parent
    logger.debug("Loaded %d manifest entries from %s", len(entries), path)
    return [entry.resolved(root) for entry in entries]

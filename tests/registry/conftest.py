"""Shared pytest fixtures for the registry test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from verloader.registry.registry import Registry


# ---------------------------------------------------------------------------
# Library file template
# ---------------------------------------------------------------------------

_CLIENT_TEMPLATE = """\
VERSION = "{version}"

class Client:
    def version(self):
        return VERSION
"""


def _write_library(root: Path, version: str) -> Path:
    """Write a small vendored library copy and return its source directory."""
    src = root / f"lib-{version}" / "src"
    src.mkdir(parents=True)
    (src / "Client.py").write_text(_CLIENT_TEMPLATE.format(version=version))
    sub = src / "Sub"
    sub.mkdir()
    (sub / "Thing.py").write_text(f'ORIGIN = "{version}"\n')
    return src


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def library_v1(tmp_path: Path) -> Path:
    """Source directory of library version 1.0.0."""
    return _write_library(tmp_path, "1.0.0")


@pytest.fixture
def library_v2(tmp_path: Path) -> Path:
    """Source directory of library version 2.0.0."""
    return _write_library(tmp_path, "2.0.0")


@pytest.fixture
def registry(meta_path: list[Any]) -> Registry:
    """Registry attached to a private meta_path list."""
    return Registry(meta_path=meta_path)


@pytest.fixture
def manifest_file(tmp_path: Path, library_v1: Path, library_v2: Path) -> Path:
    """Manifest declaring the same namespace twice plus a second namespace."""
    manifest = {
        "namespaces": [
            {"namespace": "Acme.Geocoding", "version": "1.0.0", "base_dir": str(library_v1)},
            {"namespace": "Acme.Geocoding", "version": "2.0.0", "base_dir": str(library_v2.relative_to(tmp_path))},
            {"namespace": "Acme.Mail", "version": "1.5", "base_dir": "mail/src"},
        ]
    }
    path = tmp_path / "namespaces.yaml"
    path.write_text(yaml.dump(manifest, default_flow_style=False))
    return path

"""Shared test fixtures for the verloader test suite."""

from __future__ import annotations

import importlib
import sys
import uuid
from pathlib import Path
from typing import Any, Iterator

import pytest


def _purge_modules(prefix: str) -> None:
    for name in list(sys.modules):
        if name == prefix or name.startswith(prefix + "."):
            del sys.modules[name]


# === Fixtures ===


@pytest.fixture
def ns() -> Iterator[str]:
    """A unique top-level namespace name; its modules are purged afterwards."""
    name = f"VerloaderTest{uuid.uuid4().hex[:10]}"
    yield name
    _purge_modules(name)


@pytest.fixture
def meta_path() -> list[Any]:
    """A private finder list so tests never touch sys.meta_path."""
    return []


@pytest.fixture
def write_module() -> Any:
    """Factory writing a source file at ``base/relative``, creating parent directories."""

    def factory(base: Path, relative: str, content: str = "") -> Path:
        file_path = base / relative
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path

    return factory


@pytest.fixture
def fresh_import_caches() -> Iterator[None]:
    """Invalidate importlib caches around tests that create files and then import them."""
    importlib.invalidate_caches()
    yield
    importlib.invalidate_caches()

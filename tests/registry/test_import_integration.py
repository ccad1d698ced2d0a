"""End-to-end tests: resolvers attached to the real sys.meta_path."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Any, Iterator

import pytest

from verloader.registry.registry import Registry


@pytest.fixture
def live_registry(fresh_import_caches: None) -> Iterator[Registry]:
    """Registry attached to sys.meta_path, detached after the test."""
    reg = Registry()
    yield reg
    reg.uninstall()


class TestImportStatement:
    def test_import_uses_highest_version(
        self, live_registry: Registry, ns: str, library_v1: Path, library_v2: Path
    ) -> None:
        live_registry.register(ns, "2.0.0", library_v2)
        live_registry.register(ns, "1.0.0", library_v1)
        module = importlib.import_module(f"{ns}.Client")
        assert module.VERSION == "2.0.0"
        assert module.Client().version() == "2.0.0"

    def test_later_higher_version_takes_over(
        self, live_registry: Registry, ns: str, library_v1: Path, library_v2: Path
    ) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        live_registry.register(ns, "2.0.0", library_v2)
        assert importlib.import_module(f"{ns}.Sub.Thing").ORIGIN == "2.0.0"

    def test_from_import(self, live_registry: Registry, ns: str, library_v1: Path) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        namespace: dict[str, Any] = {}
        exec(f"from {ns}.Client import Client", namespace)
        assert namespace["Client"]().version() == "1.0.0"

    def test_multi_level_namespace(
        self, live_registry: Registry, ns: str, tmp_path: Path, write_module: Any
    ) -> None:
        src = tmp_path / "geo" / "src"
        write_module(src, "Client.py", "NAME = 'geo'\n")
        live_registry.register(f"{ns}.Geocoding", "1.2.0", src)
        assert importlib.import_module(f"{ns}.Geocoding.Client").NAME == "geo"

    def test_missing_module_raises_import_error(
        self, live_registry: Registry, ns: str, library_v1: Path
    ) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        with pytest.raises(ModuleNotFoundError):
            importlib.import_module(f"{ns}.DoesNotExist")

    def test_unregistered_namespace_untouched(self, live_registry: Registry, ns: str, library_v1: Path) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        with pytest.raises(ModuleNotFoundError):
            importlib.import_module(f"{ns}Other.Client")

    def test_module_loaded_once(self, live_registry: Registry, ns: str, library_v1: Path) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        first = importlib.import_module(f"{ns}.Client")
        second = live_registry.resolve(f"{ns}.Client")
        assert first is second

    def test_uninstall_detaches(self, live_registry: Registry, ns: str, library_v1: Path) -> None:
        live_registry.register(ns, "1.0.0", library_v1)
        live_registry.uninstall()
        assert not any(finder is live_registry.get_resolver(ns) for finder in sys.meta_path)
        with pytest.raises(ModuleNotFoundError):
            importlib.import_module(f"{ns}.Client")

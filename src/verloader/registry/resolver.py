"""Namespace resolver: maps dotted module names onto files under a base directory."""

from __future__ import annotations

import importlib
import importlib.abc
import importlib.machinery
import importlib.util
import logging
import os
import sys
import threading
from types import ModuleType
from typing import Any, Sequence

from verloader.config import DEFAULT_EXTENSION
from verloader.registry.normalize import NAMESPACE_SEPARATOR, to_dotted
from verloader.registry.types import Registration

logger = logging.getLogger(__name__)

__all__ = ["NamespaceResolver"]

# Serializes direct resolution so a module body runs once even when threads race
_resolve_lock = threading.RLock()


class _DirectoryLoader(importlib.abc.Loader):
    """Loader for a package backed only by a directory (no __init__ file)."""

    def create_module(self, spec: importlib.machinery.ModuleSpec) -> ModuleType | None:
        return None

    def exec_module(self, module: ModuleType) -> None:
        pass


class NamespaceResolver(importlib.abc.MetaPathFinder):
    """Import hook for one registered namespace.

    Installed at the end of ``sys.meta_path`` it is consulted only when the
    standard finders fail. For a name ``<namespace><relative>`` it looks for
    ``<base_directory><relative with dots as os.sep><extension>``.

    The namespace root and any directory under the base directory are served
    as packages so dotted imports work parent first. Ancestors of a
    multi-level namespace root (``Acme`` for ``Acme.Geocoding.``) are served
    as empty namespace packages.

    The instance is also callable: ``resolver("Acme.Geocoding.Client")`` loads
    and returns the module, or ``None`` when it declines.
    """

    def __init__(self, registration: Registration, extension: str = DEFAULT_EXTENSION) -> None:
        self._registration = registration
        self._extension = extension

    @property
    def registration(self) -> Registration:
        return self._registration

    @property
    def namespace(self) -> str:
        return self._registration.namespace

    @property
    def version(self) -> str:
        return self._registration.version

    @property
    def base_directory(self) -> str:
        return self._registration.base_directory

    @property
    def extension(self) -> str:
        return self._extension

    def __repr__(self) -> str:
        return (
            f"NamespaceResolver(namespace={self.namespace!r}, version={self.version!r}, "
            f"base_directory={self.base_directory!r})"
        )

    # ----- Matching -----

    def matches(self, symbol: str) -> bool:
        """Whether ``symbol`` is inside the namespace (root excluded)."""
        return to_dotted(symbol).startswith(self.namespace)

    def handles(self, symbol: str) -> bool:
        """Whether ``symbol`` is the namespace root, one of its ancestors, or inside it."""
        symbol = to_dotted(symbol)
        return self.matches(symbol) or self._is_root(symbol) or self._is_ancestor(symbol)

    def _is_root(self, fullname: str) -> bool:
        return fullname == self._registration.package_name

    def _is_ancestor(self, fullname: str) -> bool:
        return bool(fullname) and self._registration.package_name.startswith(fullname + NAMESPACE_SEPARATOR)

    def candidate_path(self, symbol: str) -> str | None:
        """Return the file path checked for ``symbol``, or None if it is outside the namespace."""
        symbol = to_dotted(symbol)
        if not symbol.startswith(self.namespace):
            return None
        relative = symbol[len(self.namespace) :]
        return self.base_directory + relative.replace(NAMESPACE_SEPARATOR, os.sep) + self._extension

    # ----- sys.meta_path protocol -----

    def find_spec(
        self,
        fullname: str,
        path: Sequence[str] | None = None,
        target: ModuleType | None = None,
    ) -> importlib.machinery.ModuleSpec | None:
        """Return a spec for ``fullname`` or None to let other finders try."""
        if self._is_ancestor(fullname):
            return self._package_spec(fullname, None)

        if self._is_root(fullname):
            root = self.base_directory.rstrip(os.sep) or os.sep
            if not os.path.isdir(root):
                logger.debug("Resolver for '%s' declined root: %s is not a directory", self.namespace, root)
                return None
            return self._package_spec(fullname, root)

        candidate = self.candidate_path(fullname)
        if candidate is None:
            return None

        if os.path.isfile(candidate):
            return self._file_spec(fullname, candidate)

        directory = candidate[: len(candidate) - len(self._extension)]
        if os.path.isdir(directory):
            return self._package_spec(fullname, directory)

        logger.debug("Resolver for '%s' declined '%s': no file at %s", self.namespace, fullname, candidate)
        return None

    def _file_spec(
        self, fullname: str, file_path: str, package_dir: str | None = None
    ) -> importlib.machinery.ModuleSpec | None:
        # Explicit loader so non-.py extensions still load as source
        loader = importlib.machinery.SourceFileLoader(fullname, file_path)
        if package_dir is None:
            return importlib.util.spec_from_file_location(fullname, file_path, loader=loader)
        return importlib.util.spec_from_file_location(
            fullname, file_path, loader=loader, submodule_search_locations=[package_dir]
        )

    def _package_spec(self, fullname: str, directory: str | None) -> importlib.machinery.ModuleSpec:
        if directory is not None:
            init_file = os.path.join(directory, "__init__" + self._extension)
            if os.path.isfile(init_file):
                spec = self._file_spec(fullname, init_file, package_dir=directory)
                if spec is not None:
                    return spec

        spec = importlib.machinery.ModuleSpec(fullname, _DirectoryLoader(), is_package=True)
        spec.submodule_search_locations = [directory] if directory is not None else []
        return spec

    # ----- Direct resolution -----

    def resolve(self, symbol: str) -> ModuleType | None:
        """Load ``symbol`` through this resolver and return the module.

        Returns None if the symbol is outside the namespace or no file exists
        for it. A module already present in ``sys.modules`` is returned as is,
        so each file is executed at most once, also across threads. Parent
        packages are imported through the regular import system first, so a
        real package on ``sys.path`` is never replaced by a synthetic one.
        Errors raised while executing the file propagate unchanged.
        """
        symbol = to_dotted(symbol)
        if not self.handles(symbol):
            return None

        with _resolve_lock:
            existing = sys.modules.get(symbol)
            if existing is not None:
                return existing
            if self._is_root(symbol) or self._is_ancestor(symbol):
                return self._load_package(symbol)
            return self._load(symbol)

    def _load_package(self, name: str) -> ModuleType | None:
        existing = sys.modules.get(name)
        if existing is not None:
            return existing

        parent = name.rpartition(NAMESPACE_SEPARATOR)[0]
        if parent and self._load_package(parent) is None:
            return None

        try:
            return importlib.import_module(name)
        except ModuleNotFoundError as e:
            if e.name != name:
                raise
        return self._load(name)

    def _load(self, name: str) -> ModuleType | None:
        existing = sys.modules.get(name)
        if existing is not None:
            return existing

        spec = self.find_spec(name)
        if spec is None:
            return None

        parent, _, child = name.rpartition(NAMESPACE_SEPARATOR)
        if parent and self._load_package(parent) is None:
            return None

        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        try:
            if spec.loader is not None:
                spec.loader.exec_module(module)
        except Exception:
            sys.modules.pop(name, None)
            raise

        if parent:
            setattr(sys.modules[parent], child, module)
        logger.debug("Loaded '%s' from %s", name, spec.origin)
        return module

    def __call__(self, symbol: str) -> Any:
        return self.resolve(symbol)

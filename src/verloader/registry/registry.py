"""Version-aware namespace registry."""

from __future__ import annotations

import logging
import os
import sys
import threading
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from verloader.config import DEFAULT_EXTENSION
from verloader.errors import ConfigError, InvalidInputError
from verloader.registry.manifest import ManifestEntry, load_manifest
from verloader.registry.normalize import normalize_directory, normalize_namespace
from verloader.registry.resolver import NamespaceResolver
from verloader.registry.types import Registration
from verloader.versioning import is_newer

if TYPE_CHECKING:
    from verloader.config import Config

logger = logging.getLogger(__name__)

__all__ = ["Registry", "REGISTRY_EVENTS"]

REGISTRY_EVENTS = ("register", "ignore")


class Registry:
    """Caller-owned table of namespace registrations.

    Only a strictly higher version may replace an existing registration. Each
    winning registration gets a :class:`NamespaceResolver` which the registry
    keeps attached to ``meta_path`` while installed.
    """

    def __init__(
        self,
        config: Config | None = None,
        meta_path: list[Any] | None = None,
        extension: str | None = None,
        install: bool | None = None,
    ) -> None:
        """Initialize the Registry.

        Args:
            config: Optional Config with ``loader.*`` settings.
            meta_path: Finder list resolvers are attached to. Defaults to ``sys.meta_path``.
            extension: Source file suffix. Overrides ``loader.extension``.
            install: Attach resolvers to ``meta_path``. Overrides ``loader.install``.
        """
        if extension is None:
            extension = config.get("loader.extension", DEFAULT_EXTENSION) if config is not None else DEFAULT_EXTENSION
            if not isinstance(extension, str):
                raise ConfigError(message=f"loader.extension must be a string, got {type(extension).__name__}")
        if install is None:
            install = config.get("loader.install", True) if config is not None else True
            if not isinstance(install, bool):
                raise ConfigError(message=f"loader.install must be true or false, got {install!r}")

        self._config = config
        self._meta_path: list[Any] = meta_path if meta_path is not None else sys.meta_path
        self._extension = extension
        self._installed = install

        self._registrations: dict[str, Registration] = {}
        self._resolvers: dict[str, NamespaceResolver] = {}
        self._callbacks: dict[str, list[Callable[..., Any]]] = {event: [] for event in REGISTRY_EVENTS}
        self._write_lock = threading.RLock()

    @classmethod
    def from_config(cls, config: Config, meta_path: list[Any] | None = None) -> Registry:
        """Create a Registry and load ``loader.manifest`` if configured.

        A relative manifest path is taken relative to the config file.
        """
        registry = cls(config=config, meta_path=meta_path)
        manifest = config.get("loader.manifest")
        if manifest:
            manifest_path = Path(manifest)
            if not manifest_path.is_absolute() and config.source is not None:
                manifest_path = config.source.parent / manifest_path
            registry.load_manifest(manifest_path)
        return registry

    # ----- Registration -----

    def should_register(self, namespace: str, candidate_version: str) -> bool:
        """Whether ``candidate_version`` would win ``namespace``.

        True if the namespace is unregistered or the candidate is strictly
        newer than the stored version.
        """
        namespace = normalize_namespace(namespace)
        with self._write_lock:
            current = self._registrations.get(namespace)
        if current is None:
            return True
        return is_newer(candidate_version, current.version)

    def register(self, namespace: str, version: str, base_dir: str | os.PathLike[str]) -> bool:
        """Register ``namespace`` at ``version`` rooted at ``base_dir``.

        Equal or older versions are ignored without error.

        Returns:
            True if this registration won the namespace.

        Raises:
            InvalidInputError: If namespace or version is not a string, or
                base_dir is not a path.
        """
        if not isinstance(namespace, str):
            raise InvalidInputError(message=f"namespace must be a string, got {type(namespace).__name__}")
        if not isinstance(version, str):
            raise InvalidInputError(message=f"version must be a string, got {type(version).__name__}")
        if not isinstance(base_dir, (str, os.PathLike)):
            raise InvalidInputError(message=f"base_dir must be a path, got {type(base_dir).__name__}")

        registration = Registration(
            namespace=normalize_namespace(namespace),
            version=version,
            base_directory=normalize_directory(base_dir),
        )

        with self._write_lock:
            current = self._registrations.get(registration.namespace)
            if current is not None and not is_newer(version, current.version):
                accepted = False
            else:
                accepted = True
                resolver = NamespaceResolver(registration, extension=self._extension)
                previous = self._resolvers.get(registration.namespace)
                self._registrations[registration.namespace] = registration
                self._resolvers[registration.namespace] = resolver
                if self._installed:
                    self._swap_hook(previous, resolver)

        if not accepted:
            logger.debug(
                "Ignoring '%s' %s from %s: version %s already registered",
                registration.namespace,
                version,
                registration.base_directory,
                current.version,
            )
            self._trigger_event("ignore", registration, current)
            return False

        if current is None:
            logger.info(
                "Registered '%s' %s from %s",
                registration.namespace,
                version,
                registration.base_directory,
            )
        else:
            logger.info(
                "Replaced '%s' %s with %s from %s",
                registration.namespace,
                current.version,
                version,
                registration.base_directory,
            )
        self._trigger_event("register", registration, current)
        return True

    def register_many(self, entries: Iterable[ManifestEntry | Mapping[str, Any]]) -> int:
        """Register each entry in order. Returns how many won their namespace.

        Raises:
            InvalidInputError: If a mapping is not a valid ManifestEntry.
        """
        won = 0
        for entry in entries:
            if not isinstance(entry, ManifestEntry):
                try:
                    entry = ManifestEntry.model_validate(entry)
                except ValidationError as e:
                    raise InvalidInputError(
                        message=f"Invalid registration entry: {e.errors(include_url=False)[0]['msg']}",
                        details={"errors": e.errors(include_url=False)},
                        cause=e,
                    ) from e
            if self.register(entry.namespace, entry.version, entry.base_dir):
                won += 1
        return won

    def load_manifest(self, manifest_path: str | Path) -> int:
        """Register every namespace declared in a manifest YAML file.

        Raises:
            ConfigNotFoundError: If the manifest does not exist.
            ConfigError: If the manifest is invalid.
        """
        return self.register_many(load_manifest(manifest_path))

    # ----- Hook management -----

    def _swap_hook(self, previous: NamespaceResolver | None, resolver: NamespaceResolver) -> None:
        if previous is not None:
            for index, finder in enumerate(self._meta_path):
                if finder is previous:
                    self._meta_path[index] = resolver
                    return
        self._meta_path.append(resolver)

    def install(self) -> None:
        """Attach all current resolvers to ``meta_path``."""
        with self._write_lock:
            if self._installed:
                return
            for resolver in self._resolvers.values():
                if not any(finder is resolver for finder in self._meta_path):
                    self._meta_path.append(resolver)
            self._installed = True

    def uninstall(self) -> None:
        """Detach all resolvers from ``meta_path``. Registrations are kept."""
        with self._write_lock:
            resolvers = list(self._resolvers.values())
            self._meta_path[:] = [f for f in self._meta_path if not any(f is r for r in resolvers)]
            self._installed = False

    @property
    def installed(self) -> bool:
        """Whether resolvers are currently attached to ``meta_path``."""
        return self._installed

    # ----- Query Methods -----

    def is_registered(self, namespace: str) -> bool:
        """Check whether a namespace is registered."""
        with self._write_lock:
            return normalize_namespace(namespace) in self._registrations

    def get_version(self, namespace: str) -> str | None:
        """Return the registered version of a namespace, or None."""
        registration = self.get_registration(namespace)
        return registration.version if registration is not None else None

    def get_registration(self, namespace: str) -> Registration | None:
        """Return the winning Registration of a namespace, or None."""
        with self._write_lock:
            return self._registrations.get(normalize_namespace(namespace))

    def get_resolver(self, namespace: str) -> NamespaceResolver | None:
        """Return the active resolver of a namespace, or None."""
        with self._write_lock:
            return self._resolvers.get(normalize_namespace(namespace))

    def get_registered(self) -> dict[str, str]:
        """Return a snapshot mapping of namespace to version."""
        with self._write_lock:
            return {ns: reg.version for ns, reg in self._registrations.items()}

    def resolve(self, symbol: str) -> ModuleType | None:
        """Load ``symbol`` through the registered resolvers.

        The resolver with the longest matching namespace is tried first.
        Returns None if no resolver can supply the symbol.
        """
        with self._write_lock:
            resolvers = sorted(self._resolvers.values(), key=lambda r: len(r.namespace), reverse=True)
        for resolver in resolvers:
            if not resolver.handles(symbol):
                continue
            module = resolver.resolve(symbol)
            if module is not None:
                return module
        return None

    @property
    def count(self) -> int:
        """Number of registered namespaces."""
        with self._write_lock:
            return len(self._registrations)

    @property
    def namespaces(self) -> list[str]:
        """Sorted list of registered namespaces."""
        with self._write_lock:
            return sorted(self._registrations)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, namespace: object) -> bool:
        return isinstance(namespace, str) and self.is_registered(namespace)

    # ----- Event System -----

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        """Register an event callback.

        Args:
            event: 'register' (called with the new Registration and the one it
                replaced, or None) or 'ignore' (called with the rejected
                Registration and the current one).
            callback: Callable taking two positional arguments.

        Raises:
            InvalidInputError: If event name is invalid.
        """
        with self._write_lock:
            if event not in self._callbacks:
                raise InvalidInputError(message=f"Invalid event: {event}. Must be 'register' or 'ignore'")
            self._callbacks[event].append(callback)

    def _trigger_event(self, event: str, registration: Registration, other: Registration | None) -> None:
        """Trigger all callbacks for an event. Errors are logged and swallowed."""
        with self._write_lock:
            callbacks = list(self._callbacks.get(event, []))
        for cb in callbacks:
            try:
                cb(registration, other)
            except Exception as e:
                logger.error(
                    "Callback error for event '%s' on namespace '%s': %s",
                    event,
                    registration.namespace,
                    e,
                )

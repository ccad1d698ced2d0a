"""verloader registry: versioned namespace registration and resolution.

Usage::

    from verloader.registry import Registry

    registry = Registry()
    registry.register("Acme.Geocoding", "1.2.0", "./vendor/geocoding/src")

    import Acme.Geocoding.Client
"""

from __future__ import annotations

from verloader.registry.manifest import ManifestEntry, load_manifest, parse_manifest
from verloader.registry.normalize import NAMESPACE_SEPARATOR, normalize_directory, normalize_namespace
from verloader.registry.registry import REGISTRY_EVENTS, Registry
from verloader.registry.resolver import NamespaceResolver
from verloader.registry.types import Registration

__all__ = [
    "ManifestEntry",
    "NAMESPACE_SEPARATOR",
    "NamespaceResolver",
    "REGISTRY_EVENTS",
    "Registration",
    "Registry",
    "load_manifest",
    "normalize_directory",
    "normalize_namespace",
    "parse_manifest",
]

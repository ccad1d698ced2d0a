"""verloader - version-aware namespace loader for the Python import system."""

from __future__ import annotations

# Core
from verloader.registry import Registry
from verloader.registry.registry import REGISTRY_EVENTS
from verloader.registry.resolver import NamespaceResolver
from verloader.registry.types import Registration

# Normalization and versions
from verloader.registry.normalize import normalize_directory, normalize_namespace
from verloader.versioning import compare_versions, is_newer

# Manifests
from verloader.registry.manifest import ManifestEntry, load_manifest

# Config
from verloader.config import Config

# Errors
from verloader.errors import (
    ConfigError,
    ConfigNotFoundError,
    ErrorCodes,
    InvalidInputError,
    LoaderError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "Registry",
    "NamespaceResolver",
    "Registration",
    "REGISTRY_EVENTS",
    # Normalization and versions
    "normalize_namespace",
    "normalize_directory",
    "compare_versions",
    "is_newer",
    # Manifests
    "ManifestEntry",
    "load_manifest",
    # Config
    "Config",
    # Errors
    "ErrorCodes",
    "LoaderError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidInputError",
]

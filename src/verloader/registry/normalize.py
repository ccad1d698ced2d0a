"""Namespace and directory normalization."""

from __future__ import annotations

import os

__all__ = [
    "NAMESPACE_SEPARATOR",
    "normalize_directory",
    "normalize_namespace",
    "to_dotted",
]

NAMESPACE_SEPARATOR = "."

# Backslash-delimited names are accepted on input
_ALT_NAMESPACE_SEPARATOR = "\\"


def to_dotted(name: str) -> str:
    """Rewrite a backslash-delimited name into a dotted one."""
    return name.replace(_ALT_NAMESPACE_SEPARATOR, NAMESPACE_SEPARATOR)


def normalize_namespace(raw: str) -> str:
    """Return ``raw`` without leading/trailing separators plus one trailing ``.``.

    Empty or separator-only input yields ``"."``.
    """
    return to_dotted(raw).strip(NAMESPACE_SEPARATOR) + NAMESPACE_SEPARATOR


def normalize_directory(raw: str | os.PathLike[str]) -> str:
    """Return ``raw`` with trailing slashes replaced by exactly one ``os.sep``."""
    return os.fspath(raw).rstrip("/\\") + os.sep

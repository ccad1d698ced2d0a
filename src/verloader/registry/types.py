"""Registry types: Registration."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Registration"]


@dataclass(frozen=True)
class Registration:
    """The winning (version, base directory) pair of one namespace.

    ``namespace`` ends with a single ``.`` and ``base_directory`` with a
    single ``os.sep``.
    """

    namespace: str
    version: str
    base_directory: str

    @property
    def package_name(self) -> str:
        """The importable name of the namespace root, without the trailing dot."""
        return self.namespace[:-1]

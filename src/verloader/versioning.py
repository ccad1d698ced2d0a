"""Version ordering used to decide which registration wins a namespace."""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

__all__ = ["compare_versions", "is_newer", "version_key"]

_CORE_RE = re.compile(r"^[vV]?(\d+(?:\.\d+)*)(.*)$")
_TOKEN_RE = re.compile(r"\d+|[A-Za-z]+")

# Known pre-release markers sort before any other suffix word
_WORD_RANKS = {"dev": 0, "a": 1, "b": 2, "rc": 3}
_OTHER_WORD_RANK = len(_WORD_RANKS)

SuffixToken = tuple[int, int, str]
VersionKey = tuple[tuple[int, ...], int, tuple[SuffixToken, ...]]


def _canonical(version: str) -> str:
    """Spell a PEP 440 version canonically (``1.0.0-beta`` -> ``1.0.0b0``)."""
    text = version.strip()
    try:
        return str(Version(text))
    except InvalidVersion:
        return text


def version_key(version: str) -> VersionKey:
    """Return a sort key giving one total order over all version strings.

    The key is ``(core, bare, suffix)``:

    - ``core``: the leading dotted numbers with trailing zeros dropped, so
      missing components count as zero.
    - ``bare``: 1 when nothing follows the core, else 0. Any suffix
      (pre-release, post-release, local or free-form) ranks below the bare
      core.
    - ``suffix``: number and word tokens; numbers sort below words and
      compare numerically; ``dev < a < b < rc`` before other words.
    """
    text = _canonical(version)
    match = _CORE_RE.match(text)
    if match:
        parts = [int(part) for part in match.group(1).split(".")]
        suffix = match.group(2)
    else:
        parts = []
        suffix = text
    while parts and parts[-1] == 0:
        parts.pop()

    tokens: list[SuffixToken] = []
    for token in _TOKEN_RE.findall(suffix):
        if token.isdigit():
            tokens.append((0, int(token), ""))
        else:
            word = token.lower()
            tokens.append((1, _WORD_RANKS.get(word, _OTHER_WORD_RANK), word))
    return tuple(parts), 0 if tokens else 1, tuple(tokens)


def compare_versions(a: str, b: str) -> int:
    """Compare two version strings.

    Returns -1, 0 or 1 as ``a`` is lower than, equal to or higher than ``b``.
    """
    key_a = version_key(a)
    key_b = version_key(b)
    return (key_a > key_b) - (key_a < key_b)


def is_newer(candidate: str, current: str) -> bool:
    """Return True if ``candidate`` is strictly greater than ``current``."""
    return compare_versions(candidate, current) > 0

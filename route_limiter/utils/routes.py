"""Route pattern helpers."""
from __future__ import annotations

from fnmatch import fnmatchcase


def normalize_path(path: str) -> str:
    """Drop the query string and fragment from a request path."""

    path = (path or "").split("#", 1)[0].split("?", 1)[0].strip()
    return path or "/"


def route_has_wildcard(pattern: str) -> bool:
    """Return ``True`` when the pattern contains wildcard tokens."""

    return any(symbol in pattern for symbol in ("*", "?", "[", "]"))


def match_route_pattern(pattern: str, path: str) -> bool:
    """Check whether ``path`` satisfies a route ``pattern``.

    Plain patterns only match the identical path; wildcard patterns use
    shell-style globbing, so ``/api/*`` covers every path below ``/api/``.
    """

    path = normalize_path(path)
    if not route_has_wildcard(pattern):
        return path == pattern
    return fnmatchcase(path, pattern)

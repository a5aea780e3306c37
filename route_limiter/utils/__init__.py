"""Utility helpers."""
from .routes import (  # noqa: F401
    match_route_pattern,
    normalize_path,
    route_has_wildcard,
)

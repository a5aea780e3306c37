"""Limiter settings and environment loading utilities."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class ConfigurationError(RuntimeError):
    """Raised when the limiter is configured with unusable values."""


def _load_dotenv() -> None:
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


_load_dotenv()


def _parse_int(value: Optional[str], name: str, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _parse_routes(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(route.strip() for route in value.split(",") if route.strip())


@dataclass(frozen=True)
class LimiterSettings:
    """Immutable limiter configuration.

    ``window_ms`` and ``max_requests`` bound how many limited requests a
    client may make; ``black_listed_routes`` selects the paths that are
    limited and ``white_listed_routes`` exempts paths from that selection.
    Requests that carry no client address share the ``unknown_client_key``
    bucket.
    """

    window_ms: int = 60_000
    max_requests: int = 5
    white_listed_routes: Tuple[str, ...] = ()
    black_listed_routes: Tuple[str, ...] = ()
    unknown_client_key: str = "unknown"

    def __post_init__(self) -> None:
        if self.window_ms <= 0:
            raise ConfigurationError(f"window_ms must be positive, got {self.window_ms}")
        if self.max_requests <= 0:
            raise ConfigurationError(f"max_requests must be positive, got {self.max_requests}")
        if not self.unknown_client_key:
            raise ConfigurationError("unknown_client_key must not be empty")
        # Accept any iterable of patterns but store tuples to stay hashable.
        object.__setattr__(self, "white_listed_routes", tuple(self.white_listed_routes))
        object.__setattr__(self, "black_listed_routes", tuple(self.black_listed_routes))

    def as_public_dict(self) -> Dict[str, Any]:
        """Return the configuration using the public option names."""

        return {
            "windowMs": self.window_ms,
            "maxRequests": self.max_requests,
            "whiteListedRoutes": list(self.white_listed_routes),
            "blackListedRoutes": list(self.black_listed_routes),
        }

    @classmethod
    def from_env(cls) -> "LimiterSettings":
        window_ms = _parse_int(os.getenv("RATE_LIMIT_WINDOW_MS"), "RATE_LIMIT_WINDOW_MS", 60_000)
        max_requests = _parse_int(
            os.getenv("RATE_LIMIT_MAX_REQUESTS"), "RATE_LIMIT_MAX_REQUESTS", 5
        )
        white_listed = _parse_routes(os.getenv("RATE_LIMIT_WHITELISTED_ROUTES"))
        black_listed = _parse_routes(os.getenv("RATE_LIMIT_BLACKLISTED_ROUTES"))
        unknown_key = os.getenv("RATE_LIMIT_UNKNOWN_CLIENT_KEY", "unknown").strip() or "unknown"

        return cls(
            window_ms=window_ms,
            max_requests=max_requests,
            white_listed_routes=white_listed,
            black_listed_routes=black_listed,
            unknown_client_key=unknown_key,
        )


@lru_cache()
def get_settings() -> LimiterSettings:
    """Return cached limiter settings."""

    return LimiterSettings.from_env()

"""In-memory per-client rate limiter for selected routes."""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict, Optional, Union

from route_limiter.config import LimiterSettings
from route_limiter.utils import match_route_pattern

RouteMatcher = Callable[[str, str], bool]


def now_ms() -> float:
    """Return the current wall-clock time in milliseconds."""

    return time.time() * 1000


@dataclass
class ClientRecord:
    remaining: int
    window_start: float


@dataclass(frozen=True)
class Forward:
    """Let the request continue down the pipeline."""


@dataclass(frozen=True)
class Reject:
    """Refuse the request until the client's window runs out."""

    retry_after_seconds: int

    @property
    def message(self) -> str:
        return f"Limit exceeded, try again after {self.retry_after_seconds} sec"


Action = Union[Forward, Reject]

FORWARD = Forward()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RateLimiter:
    """Tracks limited requests per client within a sliding window.

    Only paths that match a blacklisted pattern and no whitelisted pattern
    are counted. The first request of a window is free, each later accepted
    request spends one unit and re-anchors the window at its own arrival
    time, and a client is rejected once a single unit is left.

    Records are never evicted, so memory grows with the number of distinct
    clients seen on limited routes.
    """

    def __init__(
        self,
        settings: LimiterSettings,
        matcher: RouteMatcher = match_route_pattern,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._settings = settings
        self._matcher = matcher
        self._clock = clock
        self._records: Dict[str, ClientRecord] = {}
        self._lock = Lock()

    @property
    def settings(self) -> LimiterSettings:
        return self._settings

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def is_limited(self, path: str) -> bool:
        """Return ``True`` when requests to ``path`` count against the limit."""

        blocked = any(
            self._matcher(pattern, path) for pattern in self._settings.black_listed_routes
        )
        if not blocked:
            return False
        return not any(
            self._matcher(pattern, path) for pattern in self._settings.white_listed_routes
        )

    def handle(self, client: Optional[str], path: str) -> Action:
        """Decide whether a request from ``client`` to ``path`` may proceed."""

        if not self.is_limited(path):
            return FORWARD

        key = client or self._settings.unknown_client_key
        window_ms = self._settings.window_ms
        max_requests = self._settings.max_requests

        with self._lock:
            now = self._clock()
            record = self._records.get(key)
            if record is None:
                self._records[key] = ClientRecord(remaining=max_requests, window_start=now)
                return FORWARD

            if now >= record.window_start + window_ms:
                self._records[key] = ClientRecord(remaining=max_requests, window_start=now)
                return FORWARD

            if record.remaining > 1:
                record.remaining -= 1
                record.window_start = now
                return FORWARD

            elapsed = now - record.window_start
            return Reject(retry_after_seconds=_round_half_up((window_ms - elapsed) / 1000))

    def get_record(self, client: str) -> ClientRecord | None:
        """Return a copy of the stored record for ``client``, if any."""

        with self._lock:
            record = self._records.get(client)
            return replace(record) if record is not None else None

    def reset(self) -> None:
        with self._lock:
            self._records.clear()

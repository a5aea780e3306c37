"""FastAPI middleware that applies the route limiter to inbound requests."""
from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from route_limiter.config import LimiterSettings
from route_limiter.rate_limit import RateLimiter, Reject

LOGGER = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]
Middleware = Callable[[Request, CallNext], Awaitable[Response]]


def rejection_response(action: Reject) -> JSONResponse:
    """Build the 429 response returned to a throttled client."""

    return JSONResponse(
        status_code=429,
        content={"message": action.message},
        headers={"Retry-After": str(action.retry_after_seconds)},
    )


def create_rate_limit_middleware(
    settings: LimiterSettings, limiter: Optional[RateLimiter] = None
) -> Middleware:
    """Return an ``http`` middleware closed over its own limiter registry."""

    if limiter is None:
        limiter = RateLimiter(settings)
    unknown_client_key = limiter.settings.unknown_client_key

    async def apply_rate_limiting(request: Request, call_next: CallNext) -> Response:
        client_ip = request.client.host if request.client else unknown_client_key
        path = request.url.path
        action = limiter.handle(client_ip, path)
        if isinstance(action, Reject):
            LOGGER.warning(
                "rate limit exceeded",
                extra={
                    "client_ip": client_ip,
                    "path": path,
                    "retry_after": action.retry_after_seconds,
                },
            )
            return rejection_response(action)
        try:
            response = await call_next(request)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Unhandled exception", extra={"client_ip": client_ip, "path": path})
            raise exc
        return response

    return apply_rate_limiting

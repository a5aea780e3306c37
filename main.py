"""FastAPI application guarded by the per-client route limiter."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from route_limiter.config import LimiterSettings, get_settings
from route_limiter.logging_config import configure_logging
from route_limiter.middleware import create_rate_limit_middleware
from route_limiter.rate_limit import RateLimiter

configure_logging()
LOGGER = logging.getLogger(__name__)


def create_app(settings: LimiterSettings, limiter: RateLimiter | None = None) -> FastAPI:
    """Build the application with the limiter installed as ``http`` middleware."""

    application = FastAPI(title="Route Limiter")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(create_rate_limit_middleware(settings, limiter))
    application.state.settings = settings

    @application.get("/api/health")
    async def health() -> dict:
        return {"status": "ok"}

    @application.get("/api/limits")
    async def limits(request: Request) -> dict:
        """Expose the active limiter configuration."""

        return request.app.state.settings.as_public_dict()

    LOGGER.info(
        "route limiter configured: %d requests per %d ms on %d route patterns",
        settings.max_requests,
        settings.window_ms,
        len(settings.black_listed_routes),
    )
    return application


app = create_app(get_settings())

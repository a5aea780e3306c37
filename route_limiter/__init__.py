"""Route limiter package exports commonly used helpers for convenience."""

from .config import ConfigurationError, LimiterSettings, get_settings
from .logging_config import configure_logging
from .middleware import create_rate_limit_middleware
from .rate_limit import Forward, RateLimiter, Reject

__all__ = [
    "ConfigurationError",
    "LimiterSettings",
    "get_settings",
    "configure_logging",
    "create_rate_limit_middleware",
    "Forward",
    "RateLimiter",
    "Reject",
]

"""Rate limiting for the public auth endpoints.

Limits are kept per process in memory. Rate limiting is disabled in the
testing environment.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.marketplace_auth.core.config import get_settings
from src.marketplace_auth.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Rate limit by client IP only.

    Never derive the key from request headers or body: callers could rotate
    them to get a fresh bucket on every request.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    settings = get_settings()
    if settings.app_env == "testing":
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)
    return Limiter(key_func=get_rate_limit_key)


# Reads settings at import time; changing limits requires a restart.
limiter = create_limiter()

"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

# Set APP_ENV to testing before any app imports to disable rate limiting
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-marketplace-auth.db")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-4f1c2b9e7a6d5c3b1a0f9e8d7c6b")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-9a8b7c6d5e4f3a2b1c0d9e8f7a6b")
# Cheap hashing keeps the suite fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# ruff: noqa: E402 - Imports must be after env var setup
from datetime import timedelta

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.marketplace_auth.core.config import get_settings
from src.marketplace_auth.core.logging import clear_request_context
from src.marketplace_auth.core.security import PasswordHasher, SigningKey, TokenIssuer
from tests.factories import TEST_HASHER

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()

ACCESS_SECRET = os.environ["JWT_ACCESS_SECRET"]
REFRESH_SECRET = os.environ["JWT_REFRESH_SECRET"]


@pytest.fixture
def hasher() -> PasswordHasher:
    return TEST_HASHER


@pytest.fixture
def issuer() -> TokenIssuer:
    settings = get_settings()
    return TokenIssuer(
        access_key=SigningKey(ACCESS_SECRET),
        refresh_key=SigningKey(REFRESH_SECRET),
        access_ttl=timedelta(hours=settings.access_token_expire_hours),
        refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
        issuer=settings.jwt_issuer,
    )


@pytest.fixture
def capturing_logger():
    """Route structlog output to a CapturingLogger for the duration of a test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)

"""Tests for rate limiting (src/marketplace_auth/core/rate_limit.py)."""

from unittest.mock import MagicMock, patch

import pytest
from starlette.requests import Request

from src.marketplace_auth.core.rate_limit import create_limiter, get_rate_limit_key

pytestmark = pytest.mark.unit


@pytest.fixture
def mock_request() -> MagicMock:
    request = MagicMock(spec=Request)
    request.headers = {}
    request.client = MagicMock()
    request.client.host = "192.168.1.100"
    return request


class TestGetRateLimitKey:
    def test_returns_ip(self, mock_request: MagicMock) -> None:
        with patch(
            "src.marketplace_auth.core.rate_limit.get_remote_address",
            return_value="192.168.1.100",
        ):
            assert get_rate_limit_key(mock_request) == "192.168.1.100"

    def test_ignores_headers(self, mock_request: MagicMock) -> None:
        """Forwarded headers cannot be used to pick a fresh bucket."""
        mock_request.headers = {"X-Forwarded-For": "1.2.3.4"}
        with patch(
            "src.marketplace_auth.core.rate_limit.get_remote_address",
            return_value="10.0.0.1",
        ):
            assert get_rate_limit_key(mock_request) == "10.0.0.1"

    def test_returns_unknown_when_ip_not_available(self, mock_request: MagicMock) -> None:
        with patch("src.marketplace_auth.core.rate_limit.get_remote_address", return_value=None):
            assert get_rate_limit_key(mock_request) == "unknown"


class TestCreateLimiter:
    def test_disabled_in_testing(self) -> None:
        settings = MagicMock()
        settings.app_env = "testing"
        with patch("src.marketplace_auth.core.rate_limit.get_settings", return_value=settings):
            limiter = create_limiter()
        assert limiter.enabled is False

    def test_enabled_elsewhere(self) -> None:
        settings = MagicMock()
        settings.app_env = "production"
        with patch("src.marketplace_auth.core.rate_limit.get_settings", return_value=settings):
            limiter = create_limiter()
        assert limiter.enabled is True

"""
Tests for hris/core/rate_limiter.py - client identification and the 429 envelope.
"""
import json
from unittest.mock import MagicMock, patch


class TestGetRealClientIP:
    """Test real client IP extraction."""

    def test_extracts_from_x_forwarded_for(self):
        """Should extract first IP from X-Forwarded-For header."""
        from hris.core.rate_limiter import get_real_client_ip

        mock_request = MagicMock()
        mock_request.headers = {"X-Forwarded-For": "  203.0.113.1  , 198.51.100.1"}

        assert get_real_client_ip(mock_request) == "203.0.113.1"

    def test_extracts_from_x_real_ip(self):
        from hris.core.rate_limiter import get_real_client_ip

        mock_request = MagicMock()
        mock_request.headers = {"X-Real-IP": "203.0.113.2"}

        assert get_real_client_ip(mock_request) == "203.0.113.2"

    def test_falls_back_to_direct_ip(self):
        from hris.core.rate_limiter import get_real_client_ip

        mock_request = MagicMock()
        mock_request.headers = {}

        with patch("hris.core.rate_limiter.get_remote_address", return_value="192.168.1.100"):
            assert get_real_client_ip(mock_request) == "192.168.1.100"


class TestGetUserIdentifier:
    def test_uses_user_id_when_authenticated(self, mock_user):
        from hris.core.rate_limiter import get_user_identifier

        mock_request = MagicMock()
        mock_request.state.user = mock_user

        assert get_user_identifier(mock_request) == "user:1"

    def test_falls_back_to_ip(self):
        from hris.core.rate_limiter import get_user_identifier

        mock_request = MagicMock()
        mock_request.state.user = None
        mock_request.headers = {"X-Real-IP": "10.0.0.9"}

        assert get_user_identifier(mock_request) == "ip:10.0.0.9"


class TestRateLimitExceededHandler:
    def test_uses_error_envelope(self):
        from hris.core.rate_limiter import rate_limit_exceeded_handler

        mock_request = MagicMock()
        mock_request.state.user = None
        mock_request.headers = {"X-Real-IP": "10.0.0.9"}
        exc = MagicMock()
        exc.retry_after = 30

        response = rate_limit_exceeded_handler(mock_request, exc)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "30"
        body = json.loads(response.body)
        assert body["success"] is False
        assert body["error"]["code"] == "RATE_LIMIT_EXCEEDED"
        assert "30 seconds" in body["error"]["message"]

"""Tests for security headers middleware.

Every response, errors included, carries the locked-down header set of a
JSON-only API.
"""

import pytest

from helpers.security_headers import SECURITY_HEADERS
from models.config import settings


class TestSecurityHeaders:
    """Test security headers are present in responses."""

    @pytest.mark.parametrize("name, value", sorted(SECURITY_HEADERS.items()))
    def test_header_on_health(self, client, name, value) -> None:
        response = client.get("/health")
        assert response.headers.get(name) == value

    def test_expected_policy(self) -> None:
        assert SECURITY_HEADERS["X-Content-Type-Options"] == "nosniff"
        assert SECURITY_HEADERS["X-Frame-Options"] == "DENY"
        assert SECURITY_HEADERS["Referrer-Policy"] == "no-referrer"
        assert "frame-ancestors 'none'" in SECURITY_HEADERS["Content-Security-Policy"]

    def test_responses_are_not_cached(self, client) -> None:
        response = client.get("/health")
        assert response.headers.get("Cache-Control") == "no-store"

    def test_headers_on_error_responses(self, client) -> None:
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.headers.get("X-Frame-Options") == "DENY"

    def test_no_hsts_outside_production(self, client) -> None:
        response = client.get("/health")
        assert "Strict-Transport-Security" not in response.headers

    def test_hsts_in_production(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        response = client.get("/health")
        assert response.headers.get("Strict-Transport-Security") == (
            "max-age=31536000; includeSubDomains"
        )

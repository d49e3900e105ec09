"""Tests for application wiring in main.py: health, envelopes, correlation IDs, limits."""

import re

from core.correlation import CORRELATION_HEADER


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["message"] == "Admin Panel API is running"
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", body["timestamp"])

    def test_health_is_not_rate_limited(self, client):
        for _ in range(20):
            assert client.get("/health").status_code == 200


class TestFailureEnvelope:
    def test_unknown_route(self, client):
        response = client.get("/api/unknown")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Route not found"
        assert body["timestamp"].endswith("Z")

    def test_malformed_json_body(self, client):
        response = client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_path_parameter_validation(self, client, auth_headers):
        response = client.get("/api/vet/not-a-number", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "entry_id"


class TestCorrelationId:
    def test_generated_when_absent(self, client):
        response = client.get("/health")
        assert re.match(r"^[0-9a-f]{8}$", response.headers[CORRELATION_HEADER])

    def test_incoming_id_is_echoed_in_header_and_error_body(self, client):
        response = client.get("/api/auth/me", headers={CORRELATION_HEADER: "retry-abc123"})

        assert response.status_code == 401
        assert response.headers[CORRELATION_HEADER] == "retry-abc123"
        assert response.json()["correlationId"] == "retry-abc123"

    def test_malformed_incoming_id_is_replaced(self, client):
        response = client.get("/health", headers={CORRELATION_HEADER: "no spaces!"})
        assert response.headers[CORRELATION_HEADER] != "no spaces!"


class TestRequestTiming:
    def test_response_time_header(self, client):
        response = client.get("/health")
        assert response.headers["X-Response-Time"].endswith("s")


class TestRateLimits:
    def test_login_is_rate_limited(self, client):
        statuses = [
            client.post("/api/auth/login", json={"username": "x", "password": "y"}).status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [401] * 10
        assert statuses[10] == 429

        response = client.post("/api/auth/login", json={"username": "x", "password": "y"})
        assert response.json()["message"] == (
            "Too many requests from this IP, please try again later."
        )

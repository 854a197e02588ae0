"""
Tests for API authentication.
"""

import pytest
from fastapi.testclient import TestClient

from rss_backend.config import config, state
from rss_backend.server import app


class TestAuthenticationDisabled:
    """Tests when AUTH_API_KEY is not configured."""

    def test_public_endpoint_accessible(self, client):
        """Health check should be accessible without auth."""
        response = client.get("/status")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["auth_enabled"] is False

    def test_protected_endpoint_accessible_without_auth(self, client):
        """Protected endpoints should work when auth is disabled."""
        response = client.get("/feeds")
        assert response.status_code == 200

    def test_protected_endpoint_accessible_with_random_key(self, client):
        """Protected endpoints should work with any key when auth is disabled."""
        response = client.get("/feeds", headers={"X-API-Key": "random-key"})
        assert response.status_code == 200


class TestAuthenticationEnabled:
    """Tests when AUTH_API_KEY is configured."""

    @pytest.fixture
    def client_with_auth(self, test_db, scheduler, monkeypatch):
        """Create a test client with auth enabled."""
        original_db = state.db
        original_scheduler = state.miniflux_scheduler

        monkeypatch.setattr(config, "AUTH_API_KEY", "test-secret-key-12345")
        state.db = test_db
        state.miniflux_scheduler = scheduler

        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client

        state.db = original_db
        state.miniflux_scheduler = original_scheduler

    def test_public_endpoint_accessible_without_auth(self, client_with_auth):
        """Health check should be accessible without auth even when enabled."""
        response = client_with_auth.get("/status")
        assert response.status_code == 200
        assert response.json()["auth_enabled"] is True

    def test_protected_endpoint_requires_auth(self, client_with_auth):
        """Protected endpoints should return 401 without API key."""
        response = client_with_auth.get("/feeds")
        assert response.status_code == 401
        assert "Missing API key" in response.json()["detail"]

    def test_protected_endpoint_rejects_invalid_key(self, client_with_auth):
        """Protected endpoints should return 401 with wrong API key."""
        response = client_with_auth.get("/feeds", headers={"X-API-Key": "wrong-key"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_protected_endpoint_accepts_valid_key(self, client_with_auth):
        """Protected endpoints should work with correct API key."""
        response = client_with_auth.get(
            "/feeds", headers={"X-API-Key": "test-secret-key-12345"}
        )
        assert response.status_code == 200

    @pytest.mark.parametrize("method,path", [
        ("get", "/articles"),
        ("get", "/stats"),
        ("get", "/miniflux/status"),
        ("put", "/miniflux/config"),
        ("post", "/miniflux/test"),
        ("post", "/miniflux/sync"),
    ])
    def test_all_protected_endpoints(self, client_with_auth, method, path):
        """Every non-public endpoint should require the key."""
        response = getattr(client_with_auth, method)(path)
        assert response.status_code == 401

    def test_sync_with_valid_key_reaches_handler(self, client_with_auth):
        """With a valid key the request gets past auth (and fails on config)."""
        response = client_with_auth.post(
            "/miniflux/sync", headers={"X-API-Key": "test-secret-key-12345"}
        )
        assert response.status_code == 400

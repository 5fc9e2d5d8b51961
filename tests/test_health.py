"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status and version
  - No authentication required
  - Unknown paths still come back in the error envelope
"""

from __future__ import annotations

from api.main import __version__


def test_health_returns_200_with_version(api_client):
    """Health endpoint returns 200 with status and version."""
    resp = api_client.client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["version"] == __version__


def test_health_no_auth_required(api_client):
    """Health endpoint is accessible without any authentication headers."""
    resp = api_client.client.get("/health", headers={})
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unknown_route_uses_error_envelope(api_client):
    resp = api_client.client.get("/no-such-route")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "HTTP_404"

"""
tests/test_health.py -- Integration tests for GET /api/health.

Covers:
  - 200 response inside the standard envelope
  - components.database reports 'ok' against the test database
  - No authentication required
"""

from __future__ import annotations

from unittest.mock import patch

from catalog.store import CarStore


def test_health_returns_200_with_components(api_client):
    client, _token, _uid = api_client
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["status"] == "healthy"
    assert "version" in data
    assert data["components"] == {"app": "ok", "database": "ok"}


def test_health_reports_database_error(api_client):
    client, _token, _uid = api_client
    with patch.object(CarStore, "ping", side_effect=RuntimeError("down")):
        resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["data"]["components"]["database"] == "error"


def test_health_no_auth_required(api_client):
    client, _token, _uid = api_client
    resp = client.get("/api/health", headers={})
    assert resp.status_code == 200

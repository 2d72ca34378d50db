"""
Health endpoint tests.
"""

import pytest
from fastapi.testclient import TestClient

from chartscribe.app import app


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


def test_health_endpoint(client):
    """Test that the /health/ endpoint returns 200 OK."""
    response = client.get("/health/")
    assert response.status_code == 200
    data = response.json()
    assert "data" in data
    assert data["data"]["status"] == "healthy"
    assert "timestamp" in data["data"]
    assert "version" in data["data"]
    assert data["data"]["completion_service"] in ("configured", "not_configured")


def test_request_id_is_echoed(client):
    response = client.get("/health/", headers={"X-Request-ID": "req-abc-123"})
    assert response.headers["X-Request-ID"] == "req-abc-123"
    assert response.json()["request_id"] == "req-abc-123"
    assert "X-Process-Time" in response.headers


def test_request_id_is_generated(client):
    response = client.get("/health/")
    assert response.headers["X-Request-ID"]
    assert response.json()["request_id"] == response.headers["X-Request-ID"]


def test_root_endpoint(client):
    """Test that the root endpoint returns API information."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert "version" in data
    assert data["status"] == "running"
    assert data["endpoints"]["transcribe_chart"] == "POST /charts/{appointment_id}/transcribe"

"""
Tests for the health endpoints.

Verifies the health check returns correct status, payload, and content type.
"""


def test_health_returns_200(client):
    """Health endpoint should return HTTP 200."""
    response = client.get("/api/health")
    assert response.status_code == 200


def test_health_returns_correct_json(client):
    """Health endpoint should return expected JSON payload."""
    response = client.get("/api/health")
    data = response.get_json()
    assert data["status"] == "ok"
    assert data["service"] == "newsroom-api"
    assert data["timestamp"]


def test_root_health_alias(client):
    """/health answers the same as /api/health."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_unknown_route_returns_json_404(client):
    """Werkzeug HTTP errors are rendered as JSON."""
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert "error" in response.get_json()

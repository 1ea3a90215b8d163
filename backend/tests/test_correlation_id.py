"""Tests for correlation ID header on all responses."""

from fastapi.testclient import TestClient

from app.main import app
from app.routers import tokens


def test_correlation_id_on_success(client):
    """Test that correlation ID is included on successful responses."""
    response = client.get("/health")
    assert response.status_code == 200
    assert "X-Correlation-ID" in response.headers
    assert len(response.headers["X-Correlation-ID"]) == 8  # 4 bytes as hex


def test_correlation_id_on_rejection(client):
    """Test that correlation ID is included on protocol rejections."""
    response = client.post("/request", json={"endpoint": "http://example.com", "timestamp": 0})
    assert response.status_code == 422
    assert len(response.headers["X-Correlation-ID"]) == 8


def test_correlation_id_on_validation_error(client):
    """Test that correlation ID is included on malformed-body (400) responses."""
    response = client.post("/request", json={"endpoint": 5})
    assert response.status_code == 400
    assert len(response.headers["X-Correlation-ID"]) == 8


def test_correlation_id_on_unhandled_exception(solved_response, monkeypatch):
    """Test that correlation ID is included on 500 responses from unhandled exceptions."""

    def raise_error(*args, **kwargs):
        raise RuntimeError("Unexpected failure")

    monkeypatch.setattr(tokens, "issue_token", raise_error)

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.post(
            "/response",
            json={
                "solved_challenge": solved_response.solved_challenge.model_dump(),
                "solution": solved_response.solution,
            },
        )

    assert response.status_code == 500
    assert len(response.headers["X-Correlation-ID"]) == 8
    assert response.json() == {"error": "Internal server error", "success": False}


def test_correlation_ids_unique_across_requests(client):
    """Test that each request gets a unique correlation ID."""
    response1 = client.get("/health")
    response2 = client.get("/health")

    corr_id_1 = response1.headers.get("X-Correlation-ID")
    corr_id_2 = response2.headers.get("X-Correlation-ID")

    assert corr_id_1 != corr_id_2, "Correlation IDs should be unique across requests"

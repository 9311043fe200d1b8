"""
Test API endpoints.
"""

from fastapi.testclient import TestClient


def test_root_endpoint(client: TestClient):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "HealthVault API"
    assert "version" in data
    assert data["status"] == "running"
    assert data["api_v1"] == "/api/v1"


def test_health_check(client: TestClient):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "timestamp" in data


def test_protected_route_requires_token(client: TestClient):
    """Test the normalized error body on a missing token."""
    response = client.get("/api/v1/auth/profile")
    assert response.status_code == 401
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "unauthorized"
    assert data["statusCode"] == 401


def test_garbage_token_is_rejected(client: TestClient):
    """Test a token that does not decode is a 401."""
    response = client.get(
        "/api/v1/health-id", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


def test_request_validation_error_shape(client: TestClient):
    """Test body validation failures use the same error body."""
    response = client.post("/api/v1/auth/register", json={"email": "not-an-email"})
    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "validation_error"
    assert data["statusCode"] == 422
    assert isinstance(data["detail"], list)

"""Integration tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        """Test that /health returns 200 with a healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["timestamp"] is not None


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_readiness_returns_200_when_healthy(self, client: TestClient) -> None:
        """Test that /health/ready returns 200 when the database answers."""
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value={"healthy": True}),
        ):
            response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert [check["name"] for check in data["checks"]] == ["database"]

    def test_readiness_returns_503_when_unhealthy(self, client: TestClient) -> None:
        """Test that /health/ready returns 503 when the database is down."""
        with patch(
            "src.api.routes.health.check_database_connection",
            AsyncMock(return_value={"healthy": False, "error": "connection refused"}),
        ):
            response = client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["checks"][0]["error"] == "connection refused"


class TestAuthenticatedHealthEndpoint:
    """Tests for /health/auth endpoint."""

    def test_requires_token(self, client: TestClient) -> None:
        response = client.get("/health/auth")

        assert response.status_code == 401
        assert response.json() == {"errors": {"msg": "No token, authorization denied."}}

    def test_returns_user_id(self, client: TestClient, auth_headers: dict[str, str]) -> None:
        response = client.get("/health/auth", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "authenticated": True,
            "user_id": "550e8400-e29b-41d4-a716-446655440000",
        }

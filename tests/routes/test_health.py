from fastapi.testclient import TestClient


class TestHealthEndpoint:
    def test_health_endpoint_exists(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_correct_structure(self, client: TestClient):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["database"] is True
        assert data["completion"] is True

    def test_health_reports_closed_completion_client(self, client: TestClient, services):
        services.completion_client.is_initialized = False

        data = client.get("/health").json()
        assert data["completion"] is False

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")

"""
Contract tests for health, readiness, metrics and cross-cutting middleware.
"""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from brewery_api.src.dependencies import get_beer_repository


class TestOperationalEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "Brewery API"

    def test_ready_without_database(self, client):
        response = client.get("/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["database"] == "unavailable"

    def test_ready_with_database(self, app):
        conn = MagicMock()
        conn.fetchval = AsyncMock(return_value="PostgreSQL 16")
        acquire = MagicMock()
        acquire.__aenter__ = AsyncMock(return_value=conn)
        acquire.__aexit__ = AsyncMock(return_value=False)
        pool = MagicMock()
        pool.acquire.return_value = acquire
        pool.get_size.return_value = 2
        pool.get_idle_size.return_value = 2
        app.state.db_pool = pool

        response = TestClient(app).get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_metrics_exposed_without_token(self, client):
        client.get("/api/v2/beer/1")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text
        assert 'endpoint="/api/v2/beer/{beer_id}"' in response.text
        assert "brewery_resource_operations_total" in response.text


class TestMiddleware:

    def test_correlation_id_echoed(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_correlation_id_generated(self, client):
        response = client.get("/api/v2/beer/1")

        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_security_headers(self, client):
        response = client.get("/api/v2/beer")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "Strict-Transport-Security" not in response.headers

    def test_security_headers_on_401(self, client):
        response = client.post("/api/v2/beer", json={})

        assert response.status_code == 401
        assert response.headers["X-Frame-Options"] == "DENY"


class TestErrorHandling:

    def test_store_failure_is_500(self, app):
        broken = MagicMock()
        broken.find_by_id = AsyncMock(side_effect=RuntimeError("connection refused"))
        app.dependency_overrides[get_beer_repository] = lambda: broken

        response = TestClient(app, raise_server_exceptions=False).get("/api/v2/beer/1")

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}

"""Tests for health, readiness and the Prometheus scrape endpoint."""

import pytest
from sqlalchemy.exc import OperationalError

from app.database import get_db
from app.main import app


class UnreachableDatabase:
    def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    def rollback(self):
        pass


@pytest.fixture
def database_down(client):
    app.dependency_overrides[get_db] = lambda: UnreachableDatabase()
    yield


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["service"] == "courtside-api"
        assert data["version"] == "1.0.0"

    def test_degraded_when_database_is_down(self, client, database_down):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "disconnected"

    def test_lite(self, client):
        assert client.get("/api/v1/health/lite").json() == {"status": "ok"}


class TestReadiness:
    def test_ready(self, client):
        response = client.get("/api/v1/health/readiness")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "database": "connected"}

    def test_not_ready(self, client, database_down):
        response = client.get("/api/v1/health/readiness")
        assert response.status_code == 503
        assert response.json() == {"status": "not_ready", "database": "disconnected"}


def test_root_and_metrics(client):
    assert client.get("/").status_code == 200

    client.get("/api/v1/health/lite")
    metrics = client.get("/metrics/prometheus")

    assert metrics.status_code == 200
    assert metrics.headers["content-type"].startswith("text/plain")
    assert "courtside_http_requests_total" in metrics.text


def test_unknown_route_is_problem_json(client):
    response = client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json()["status"] == 404

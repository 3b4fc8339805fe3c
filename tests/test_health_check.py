from unittest import mock

import pytest


class TestHealthCheck:
    def test_health_check_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert set(data["services"]) == {"database", "cache", "realtime"}

    def test_health_check_reports_database_status(self, client):
        data = client.get("/health").json()
        assert data["services"]["database"]["status"] == "up"
        assert "response_time_ms" in data["services"]["database"]

    def test_health_check_reports_realtime_hub(self, client):
        realtime = client.get("/health").json()["services"]["realtime"]
        assert realtime["status"] == "up"
        assert realtime["connections"] >= 0

    def test_missing_hub_is_unhealthy(self, client):
        with mock.patch(
            "modules.core.views.get_hub", side_effect=RuntimeError("not initialized")
        ):
            response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["services"]["realtime"] == {"status": "down"}

    def test_api_docs_are_served(self, client):
        assert client.get("/api/docs/").status_code == 200

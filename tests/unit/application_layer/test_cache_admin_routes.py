"""
Unit Tests for the Cache Admin API

The application is built with create_app() and its state populated directly,
so the lifespan (and Redis) never runs.
"""

import pytest
from fastapi.testclient import TestClient

from commerce_cache.application.app import create_app
from commerce_cache.application.services.monitoring_service import (
    RECOMMEND_NO_TRAFFIC,
    CacheMonitoringService,
)
from commerce_cache.application.services.warming_service import CacheWarmingService
from commerce_cache.core.config.constants import HEADER_REQUEST_ID
from tests.test_fixtures.cache_factory import CacheTestFactory

BASE = "/api/admin/cache"


def _wire(app, cache_client, data_source, mock_settings):
    app.state.cache_client = cache_client
    app.state.monitoring_service = CacheMonitoringService(cache_client)
    app.state.warming_service = CacheWarmingService(cache_client, data_source, settings=mock_settings)


@pytest.fixture
def app(cache_client, data_source, mock_settings):
    application = create_app(data_source)
    _wire(application, cache_client, data_source, mock_settings)
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.mark.unit
class TestInspectionEndpoints:
    """GET metrics / health / report / memory"""

    def test_metrics(self, client):
        response = client.get(f"{BASE}/metrics")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["hits"] == 0
        assert body["data"]["hit_rate"] == 0.0
        assert "last_reset_time" in body["data"]

    def test_health(self, client):
        response = client.get(f"{BASE}/health")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["is_available"] is True
        assert data["recommendations"][-1] == RECOMMEND_NO_TRAFFIC
        assert "used_memory" in data["memory_usage"]

    def test_report(self, client):
        response = client.get(f"{BASE}/report")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["summary"].startswith("Cache Performance Summary:")
        assert data["health"]["is_available"] is True

    def test_memory(self, client):
        response = client.get(f"{BASE}/memory")

        assert response.status_code == 200
        assert response.json()["data"]["maxmemory_policy"] == "noeviction"

    def test_memory_unsupported_backend_is_null(self, data_source, mock_settings, basic_backend):
        application = create_app(data_source)
        _wire(application, CacheTestFactory.cache_client(basic_backend), data_source, mock_settings)

        response = TestClient(application).get(f"{BASE}/memory")

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": None}


@pytest.mark.unit
class TestWarmupEndpoints:
    """POST warmup endpoints"""

    def test_warmup(self, client, in_memory_backend):
        response = client.post(f"{BASE}/warmup")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Cache warmup completed successfully"}
        assert "v1:admin:settings:all" in in_memory_backend.data

    def test_warmup_featured_products(self, client, in_memory_backend):
        response = client.post(f"{BASE}/warmup/featured-products")

        assert response.status_code == 200
        assert response.json()["message"] == "Featured products cache warmup completed successfully"
        assert "v1:admin:products:details:p-1" in in_memory_backend.data

    def test_warmup_analytics(self, client, in_memory_backend):
        response = client.post(f"{BASE}/warmup/analytics")

        assert response.status_code == 200
        assert response.json()["message"] == "Analytics cache warmup completed successfully"
        assert any(key.startswith("v1:admin:sales:analytics:") for key in in_memory_backend.data)


@pytest.mark.unit
class TestMaintenanceEndpoints:
    """DELETE clear / metrics reset and POST configure/lru"""

    def test_clear(self, client, in_memory_backend):
        in_memory_backend.data.update({"v1:admin:users:1": "a", "v1:admin:products:2": "b"})

        response = client.delete(f"{BASE}/clear")

        assert response.status_code == 200
        assert response.json()["message"] == "Cache cleared successfully"
        assert in_memory_backend.data == {}

    def test_clear_failure_is_503(self, client, in_memory_backend):
        in_memory_backend.fail_on.add("keys")

        response = client.delete(f"{BASE}/clear")

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "CacheInvalidationError"

    def test_reset_metrics(self, client, cache_client):
        client.get(f"{BASE}/health")

        response = client.delete(f"{BASE}/metrics/reset")

        assert response.status_code == 200
        assert response.json()["message"] == "Cache metrics reset successfully"
        assert cache_client.get_metrics().total_requests == 0

    def test_configure_lru(self, client, in_memory_backend):
        response = client.post(f"{BASE}/configure/lru")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "LRU eviction policy configured successfully",
        }
        assert in_memory_backend.config["maxmemory-policy"] == "allkeys-lru"

    def test_configure_lru_failure(self, client, in_memory_backend):
        in_memory_backend.fail_on.add("config_set")

        response = client.post(f"{BASE}/configure/lru")

        assert response.status_code == 200
        assert response.json()["success"] is False


@pytest.mark.unit
class TestApplicationWiring:
    """Root endpoint, request IDs and uninitialized state."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["cache_admin"] == BASE

    def test_request_id_is_echoed(self, client):
        response = client.get(f"{BASE}/metrics", headers={HEADER_REQUEST_ID: "req-123"})

        assert response.headers[HEADER_REQUEST_ID] == "req-123"

    def test_request_id_is_generated(self, client):
        response = client.get(f"{BASE}/metrics")

        assert response.headers[HEADER_REQUEST_ID]

    def test_missing_components_are_503(self):
        response = TestClient(create_app()).get(f"{BASE}/metrics")

        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["error_type"] == "ConfigurationError"
        assert body["details"] == {"component": "monitoring_service"}

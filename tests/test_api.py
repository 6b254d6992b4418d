"""
Tests for the cache administration API.
"""

import pytest
from fastapi.testclient import TestClient

from response_cache.api.app import app
from response_cache.api.dependencies import get_handler
from response_cache.entities import Artifact
from response_cache.handlers import CacheHandler
from response_cache.services import ResponseCacheService
from tests.fakes.fake_store import FailingStore


@pytest.fixture
def handler(service: ResponseCacheService) -> CacheHandler:
    return CacheHandler(cache_service=service)


@pytest.fixture
def client(handler: CacheHandler):
    """Create a test client backed by fakeredis."""
    app.dependency_overrides[get_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def down_client():
    """Create a test client whose cache backend is unreachable."""
    down_handler = CacheHandler(cache_service=ResponseCacheService(repository=FailingStore()))
    app.dependency_overrides[get_handler] = lambda: down_handler
    yield TestClient(app)
    app.dependency_overrides.clear()


def _store(service: ResponseCacheService, mode: str, context) -> str:
    fingerprint = service.fingerprint(mode, context)
    artifact = Artifact.from_generation({"text": "generated", "model": "x", "cost_usd": 0.002})
    service.repository.set(fingerprint, mode, context, artifact)
    return fingerprint


def _populate(service: ResponseCacheService) -> None:
    quiz = _store(service, "quiz", {"topicId": 1})
    service.repository.get(quiz)
    _store(service, "summary", {"topicIds": [1, 2, 3]})


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "AI Response Cache API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_healthy": True}


def test_health_when_backend_down(down_client):
    response = down_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "unhealthy"


def test_stats_empty(client):
    response = client.get("/cache/stats")
    assert response.status_code == 200
    assert response.json() == {
        "total_entries": 0,
        "total_hits": 0,
        "total_cost_saved": 0.0,
        "hit_rate": 0.0,
        "by_mode": {},
    }


def test_stats_after_traffic(client, service):
    _populate(service)

    data = client.get("/cache/stats").json()

    assert data["total_entries"] == 2
    assert data["total_hits"] == 1
    assert data["total_cost_saved"] == pytest.approx(0.002)
    assert data["hit_rate"] == pytest.approx(33.33)
    assert data["by_mode"]["quiz"] == {"count": 1, "hits": 1, "cost_saved": pytest.approx(0.002)}
    assert data["by_mode"]["summary"] == {"count": 1, "hits": 0, "cost_saved": 0.0}


def test_clear_by_mode(client, service):
    _populate(service)

    response = client.delete("/cache", params={"mode": "quiz"})

    assert response.status_code == 200
    assert response.json() == {"deleted_count": 1, "mode": "quiz"}
    assert set(client.get("/cache/stats").json()["by_mode"]) == {"summary"}


def test_clear_all(client, service):
    _populate(service)

    response = client.delete("/cache")

    assert response.json() == {"deleted_count": 2, "mode": None}
    assert client.get("/cache/stats").json()["total_entries"] == 0


def test_stats_when_backend_down(down_client):
    response = down_client.get("/cache/stats")
    assert response.status_code == 503


def test_fingerprint_ignores_key_order(client):
    first = client.post("/cache/fingerprint", json={"mode": "quiz", "context": {"a": 1, "b": [1, 2]}})
    second = client.post("/cache/fingerprint", json={"mode": "quiz", "context": {"b": [1, 2], "a": 1}})

    assert first.status_code == 200
    assert first.json()["fingerprint"] == second.json()["fingerprint"]
    assert len(first.json()["fingerprint"]) == 64
    assert first.json()["model_hint"]


def test_fingerprint_requires_mode(client):
    response = client.post("/cache/fingerprint", json={"context": {}})
    assert response.status_code == 422


def test_fingerprint_rejects_non_finite_context(client):
    response = client.post(
        "/cache/fingerprint",
        content='{"mode": "quiz", "context": {"weight": NaN}}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["detail"].startswith("Malformed context")


def test_get_entry_does_not_count_hits(client, service):
    fingerprint = _store(service, "summary", {"topicIds": [1, 2, 3]})

    first = client.get(f"/cache/entries/{fingerprint}")
    second = client.get(f"/cache/entries/{fingerprint}")

    assert first.status_code == 200
    data = second.json()
    assert data["hits"] == 0
    assert data["mode"] == "summary"
    assert data["context"] == {"topicIds": [1, 2, 3]}
    assert data["content"] == {"text": "generated"}
    assert data["usage"]["model"] == "x"
    assert data["expires_at"] is not None


def test_get_missing_entry(client):
    response = client.get("/cache/entries/" + "0" * 64)
    assert response.status_code == 404


def test_delete_entry(client, service):
    fingerprint = _store(service, "quiz", {"topicId": 5})

    response = client.delete(f"/cache/entries/{fingerprint}")

    assert response.json() == {"deleted": True, "fingerprint": fingerprint}
    assert client.get(f"/cache/entries/{fingerprint}").status_code == 404

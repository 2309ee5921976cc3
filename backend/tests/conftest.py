"""
Pytest configuration and shared fixtures for the gym catalog tests.

Provides:
- fake_redis: in-memory Redis stub wired into the cache module
- store: empty in-memory RouteStore
- test_client: FastAPI TestClient using the in-memory store
"""
import fnmatch

import pytest

from gym_catalog.api.deps import get_route_store
from gym_catalog.utils import cache as cache_utils
from factories import FakeRouteStore


class FakeRedis:
    """Minimal Redis stub covering the commands the cache module uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl
        return True

    def delete(self, *keys):
        deleted = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                self.ttls.pop(key, None)
                deleted += 1
        return deleted

    def scan_iter(self, match=None, count=None):
        for key in list(self.data):
            if match is None or fnmatch.fnmatchcase(key, match):
                yield key


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(cache_utils, "get_redis_client", lambda: fake)
    return fake


@pytest.fixture
def no_redis(monkeypatch):
    monkeypatch.setattr(cache_utils, "get_redis_client", lambda: None)


@pytest.fixture
def store():
    return FakeRouteStore()


@pytest.fixture(scope="function")
def test_client(store, fake_redis):
    """
    Synchronous HTTP client for testing FastAPI endpoints.

    The route store dependency is swapped for the in-memory `store`
    fixture; tests fill it before making requests.

    Usage:
        def test_example(test_client, store):
            store.routes[1] = make_route(1)
            response = test_client.get("/api/v1/gyms/1/routes")
            assert response.status_code == 200
    """
    from fastapi.testclient import TestClient
    from gym_catalog.main import app

    app.dependency_overrides[get_route_store] = lambda: store
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

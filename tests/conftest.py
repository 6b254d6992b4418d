"""Shared fixtures for response cache tests."""

from __future__ import annotations

import fakeredis
import pytest

from response_cache.repositories import RedisResponseCacheRepository
from response_cache.services import ResponseCacheService
from tests.fakes.fake_clock import FakeClock
from tests.fakes.fake_generator import CountingGenerator


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    """Isolated in-memory Redis server."""
    return fakeredis.FakeServer()


@pytest.fixture
def redis_client(redis_server: fakeredis.FakeServer) -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository(redis_client: fakeredis.FakeRedis, clock: FakeClock) -> RedisResponseCacheRepository:
    """Repository over fakeredis with a 7-day default TTL and a manual clock."""
    return RedisResponseCacheRepository(
        redis_client=redis_client,
        key_prefix="test_cache",
        ttl=604800,
        clock=clock,
    )


@pytest.fixture
def service(repository: RedisResponseCacheRepository) -> ResponseCacheService:
    return ResponseCacheService(repository=repository, ttl=604800)


@pytest.fixture
def generator() -> CountingGenerator:
    return CountingGenerator()

# tests/test_session_store.py
import asyncio

import fakeredis.aioredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.storefront.core.config import Settings
from src.storefront.core.errors import StoreError
from src.storefront.core.session_store import (
    MemorySessionStore, RedisSessionStore, SESSION_KEY_FMT, build_session_store,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_memory_store_round_trip():
    store = MemorySessionStore()

    async def scenario():
        await store.set("s1", {"admin_id": "a1", "admin_username": "admin"}, ttl=60)
        data = await store.get("s1")
        await store.delete("s1")
        return data, await store.get("s1")

    data, after_delete = asyncio.run(scenario())
    assert data == {"admin_id": "a1", "admin_username": "admin"}
    assert after_delete is None


def test_memory_store_expires_entries():
    clock = FakeClock()
    store = MemorySessionStore(clock=clock)

    async def scenario():
        await store.set("s1", {"admin_id": "a1"}, ttl=10)
        clock.now += 9
        alive = await store.get("s1")
        clock.now += 2
        return alive, await store.get("s1")

    alive, expired = asyncio.run(scenario())
    assert alive == {"admin_id": "a1"}
    assert expired is None
    assert len(store) == 0


def test_memory_store_touch_extends_ttl():
    clock = FakeClock()
    store = MemorySessionStore(clock=clock)

    async def scenario():
        await store.set("s1", {"admin_id": "a1"}, ttl=10)
        clock.now += 8
        await store.touch("s1", ttl=10)
        clock.now += 8
        return await store.get("s1")

    assert asyncio.run(scenario()) == {"admin_id": "a1"}


def test_memory_store_prunes_on_write():
    clock = FakeClock()
    store = MemorySessionStore(check_period=60, clock=clock)

    async def scenario():
        await store.set("old", {"admin_id": "a1"}, ttl=5)
        clock.now += 61
        await store.set("new", {"admin_id": "a2"}, ttl=5)

    asyncio.run(scenario())
    assert len(store) == 1


def test_redis_store_round_trip_with_ttl():
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    store = RedisSessionStore(redis)

    async def scenario():
        await store.set("s1", {"admin_id": "a1", "admin_username": "admin"}, ttl=120)
        data = await store.get("s1")
        ttl = await redis.ttl(SESSION_KEY_FMT.format(sid="s1"))
        await store.delete("s1")
        return data, ttl, await store.get("s1")

    data, ttl, after_delete = asyncio.run(scenario())
    assert data == {"admin_id": "a1", "admin_username": "admin"}
    assert 0 < ttl <= 120
    assert after_delete is None


def test_redis_store_touch_refreshes_ttl():
    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)
    store = RedisSessionStore(redis)

    async def scenario():
        await store.set("s1", {"admin_id": "a1"}, ttl=5)
        await store.touch("s1", ttl=500)
        return await redis.ttl(SESSION_KEY_FMT.format(sid="s1"))

    assert asyncio.run(scenario()) > 5


class BrokenRedis:
    async def get(self, key):
        raise RedisConnectionError("connection refused")


def test_redis_failures_become_store_errors():
    store = RedisSessionStore(BrokenRedis())
    with pytest.raises(StoreError):
        asyncio.run(store.get("s1"))


def test_build_session_store_selects_backend():
    assert isinstance(build_session_store(Settings(SECRET_KEY="k", SESSION_BACKEND="memory")), MemorySessionStore)
    store = build_session_store(Settings(SECRET_KEY="k", SESSION_BACKEND="redis", REDIS_URL="redis://localhost:6399/0"))
    assert isinstance(store, RedisSessionStore)


def test_unknown_session_backend_is_rejected():
    with pytest.raises(ValueError):
        Settings(SECRET_KEY="k", SESSION_BACKEND="memcached")

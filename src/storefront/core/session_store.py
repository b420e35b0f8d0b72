# src/storefront/core/session_store.py
import functools
import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.storefront.core.config import Settings
from src.storefront.core.errors import StoreError

logger = logging.getLogger(__name__)

SESSION_KEY_FMT = "session:{sid}"


class SessionStore:
    """Async key-value store for session records, each with its own TTL."""

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def set(self, sid: str, data: Dict[str, Any], ttl: int) -> None:
        raise NotImplementedError

    async def touch(self, sid: str, ttl: int) -> None:
        raise NotImplementedError

    async def delete(self, sid: str) -> None:
        raise NotImplementedError

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class MemorySessionStore(SessionStore):
    """In-process store. Expired entries are dropped on read and swept
    every ``check_period`` seconds on write."""

    def __init__(self, check_period: float = 86400.0, clock=time.monotonic):
        self._data: Dict[str, Tuple[str, float]] = {}
        self._clock = clock
        self._check_period = check_period
        self._last_prune = clock()

    def __len__(self) -> int:
        return len(self._data)

    def prune(self) -> int:
        now = self._clock()
        expired = [sid for sid, (_, expires) in self._data.items() if expires <= now]
        for sid in expired:
            del self._data[sid]
        self._last_prune = now
        if expired:
            logger.debug("Pruned %d expired sessions", len(expired))
        return len(expired)

    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        entry = self._data.get(sid)
        if entry is None:
            return None
        raw, expires = entry
        if expires <= self._clock():
            del self._data[sid]
            return None
        return json.loads(raw)

    async def set(self, sid: str, data: Dict[str, Any], ttl: int) -> None:
        now = self._clock()
        if now - self._last_prune >= self._check_period:
            self.prune()
        # stored serialized so callers never share a mutable dict
        self._data[sid] = (json.dumps(data), now + ttl)

    async def touch(self, sid: str, ttl: int) -> None:
        entry = self._data.get(sid)
        if entry is not None:
            self._data[sid] = (entry[0], self._clock() + ttl)

    async def delete(self, sid: str) -> None:
        self._data.pop(sid, None)


def _redis_call(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except RedisError as e:
            logger.exception("Session store call %s failed", func.__name__)
            raise StoreError("Session store unavailable") from e
    return wrapper


class RedisSessionStore(SessionStore):
    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_url(cls, url: str, max_connections: int = 10) -> "RedisSessionStore":
        client = Redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=max_connections,
        )
        logger.info("Initialized Redis session store at %s", url)
        return cls(client)

    @_redis_call
    async def get(self, sid: str) -> Optional[Dict[str, Any]]:
        val = await self.redis.get(SESSION_KEY_FMT.format(sid=sid))
        if not val:
            return None
        try:
            return json.loads(val)
        except ValueError:
            logger.warning("Discarding unreadable session record")
            return None

    @_redis_call
    async def set(self, sid: str, data: Dict[str, Any], ttl: int) -> None:
        await self.redis.set(SESSION_KEY_FMT.format(sid=sid), json.dumps(data), ex=ttl)

    @_redis_call
    async def touch(self, sid: str, ttl: int) -> None:
        await self.redis.expire(SESSION_KEY_FMT.format(sid=sid), ttl)

    @_redis_call
    async def delete(self, sid: str) -> None:
        await self.redis.delete(SESSION_KEY_FMT.format(sid=sid))

    @_redis_call
    async def ping(self) -> bool:
        return bool(await self.redis.ping())

    async def close(self) -> None:
        await self.redis.aclose()


def build_session_store(settings: Settings) -> SessionStore:
    if settings.SESSION_BACKEND == "redis":
        return RedisSessionStore.from_url(settings.redis_url, max_connections=settings.POOL_SIZE)
    return MemorySessionStore()

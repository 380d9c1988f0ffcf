"""
Lookup cache for user identity queries.

Two named caches are used, one keyed by login and one keyed by email. Keys
are lower-cased so lookups are case-insensitive. Only positive results are
stored. Backends signal failures with CacheUnavailableError; callers treat
the cache as best-effort and fall through to the store.
"""

from __future__ import annotations

import json
import threading
from typing import Protocol

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from src.core.config import Settings
from src.domain.models import User

logger = structlog.get_logger()

USERS_BY_LOGIN_CACHE = "usersByLogin"
USERS_BY_EMAIL_CACHE = "usersByEmail"

CACHE_NAMES: tuple[str, ...] = (USERS_BY_LOGIN_CACHE, USERS_BY_EMAIL_CACHE)


class CacheUnavailableError(Exception):
    """Raised when the cache backend cannot serve a request."""


class LookupCache(Protocol):
    """Protocol for the user lookup cache (allows swapping backends)."""

    async def get(self, cache_name: str, key: str) -> User | None: ...

    async def put_if_absent(self, cache_name: str, key: str, user: User) -> User: ...

    async def evict(self, cache_name: str, key: str) -> None: ...

    async def clear(self) -> None: ...

    async def ping(self) -> None: ...

    async def close(self) -> None: ...


def normalize_key(key: str) -> str:
    return key.lower()


class InMemoryLookupCache:
    """Process-local cache with per-key insert-if-absent semantics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, dict[str, User]] = {name: {} for name in CACHE_NAMES}

    def _bucket(self, cache_name: str) -> dict[str, User]:
        try:
            return self._entries[cache_name]
        except KeyError as exc:
            raise CacheUnavailableError(f"Unknown cache '{cache_name}'") from exc

    async def get(self, cache_name: str, key: str) -> User | None:
        with self._lock:
            return self._bucket(cache_name).get(normalize_key(key))

    async def put_if_absent(self, cache_name: str, key: str, user: User) -> User:
        """Store ``user`` unless the key is already present; return the cached value."""
        with self._lock:
            return self._bucket(cache_name).setdefault(normalize_key(key), user)

    async def evict(self, cache_name: str, key: str) -> None:
        with self._lock:
            self._bucket(cache_name).pop(normalize_key(key), None)

    async def clear(self) -> None:
        with self._lock:
            for bucket in self._entries.values():
                bucket.clear()

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        return None

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._entries.values())


class RedisLookupCache:
    """Redis-backed cache; entries are JSON user snapshots with a TTL."""

    def __init__(
        self,
        client: aioredis.Redis,
        *,
        ttl_seconds: int = 3600,
        namespace: str = "cat",
    ) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._namespace = namespace

    @classmethod
    def from_url(cls, url: str, *, ttl_seconds: int = 3600) -> RedisLookupCache:
        return cls(aioredis.from_url(url), ttl_seconds=ttl_seconds)

    def _key(self, cache_name: str, key: str) -> str:
        return f"{self._namespace}:{cache_name}:{normalize_key(key)}"

    async def get(self, cache_name: str, key: str) -> User | None:
        try:
            raw = await self._client.get(self._key(cache_name, key))
        except RedisError as exc:
            raise CacheUnavailableError(str(exc)) from exc
        if raw is None:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (TypeError, ValueError) as exc:
            raise CacheUnavailableError(f"Corrupt cache entry for '{key}'") from exc

    async def put_if_absent(self, cache_name: str, key: str, user: User) -> User:
        payload = json.dumps(user.to_dict())
        try:
            stored = await self._client.set(
                self._key(cache_name, key), payload, nx=True, ex=self._ttl_seconds
            )
        except RedisError as exc:
            raise CacheUnavailableError(str(exc)) from exc
        if stored:
            return user
        # Another worker won the race; prefer its entry
        existing = await self.get(cache_name, key)
        return existing or user

    async def evict(self, cache_name: str, key: str) -> None:
        try:
            await self._client.delete(self._key(cache_name, key))
        except RedisError as exc:
            raise CacheUnavailableError(str(exc)) from exc

    async def clear(self) -> None:
        try:
            async for redis_key in self._client.scan_iter(match=f"{self._namespace}:*"):
                await self._client.delete(redis_key)
        except RedisError as exc:
            raise CacheUnavailableError(str(exc)) from exc

    async def ping(self) -> None:
        try:
            await self._client.ping()
        except RedisError as exc:
            raise CacheUnavailableError(str(exc)) from exc

    async def close(self) -> None:
        await self._client.aclose()


def build_lookup_cache(settings: Settings) -> LookupCache:
    """Create the cache backend selected by ``CACHE_BACKEND``."""
    if settings.cache_backend == "redis":
        logger.info("lookup_cache_configured", backend="redis", ttl=settings.cache_ttl_seconds)
        return RedisLookupCache.from_url(settings.redis_url, ttl_seconds=settings.cache_ttl_seconds)
    logger.info("lookup_cache_configured", backend="memory")
    return InMemoryLookupCache()

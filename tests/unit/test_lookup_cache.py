from __future__ import annotations

import asyncio
import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from src.domain.models import User
from src.infrastructure.cache import (
    USERS_BY_EMAIL_CACHE,
    USERS_BY_LOGIN_CACHE,
    CacheUnavailableError,
    InMemoryLookupCache,
    RedisLookupCache,
)

BOB = User(id="u-1", login="bob", email="bob@example.com", activated=True)


class TestInMemoryLookupCache:
    async def test_keys_are_case_insensitive(self) -> None:
        cache = InMemoryLookupCache()
        await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "Bob", BOB)

        assert await cache.get(USERS_BY_LOGIN_CACHE, "BOB") == BOB
        assert await cache.get(USERS_BY_LOGIN_CACHE, "bob") == BOB

    async def test_keys_are_not_trimmed(self) -> None:
        cache = InMemoryLookupCache()
        await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB)

        assert await cache.get(USERS_BY_LOGIN_CACHE, " bob ") is None

    async def test_named_caches_are_independent(self) -> None:
        cache = InMemoryLookupCache()
        await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB)

        assert await cache.get(USERS_BY_EMAIL_CACHE, "bob") is None

    async def test_put_if_absent_keeps_first_entry(self) -> None:
        cache = InMemoryLookupCache()
        other = User(id="u-2", login="bob")

        first = await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB)
        second = await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", other)

        assert first == BOB
        assert second == BOB

    async def test_concurrent_inserts_leave_one_entry(self) -> None:
        cache = InMemoryLookupCache()
        candidates = [User(id=f"u-{i}", login="carol") for i in range(20)]

        results = await asyncio.gather(
            *(cache.put_if_absent(USERS_BY_LOGIN_CACHE, "carol", user) for user in candidates)
        )

        assert len({user.id for user in results}) == 1
        assert len(cache) == 1

    async def test_evict_and_clear(self) -> None:
        cache = InMemoryLookupCache()
        await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB)
        await cache.put_if_absent(USERS_BY_EMAIL_CACHE, "bob@example.com", BOB)

        await cache.evict(USERS_BY_LOGIN_CACHE, "BOB")
        assert await cache.get(USERS_BY_LOGIN_CACHE, "bob") is None
        assert len(cache) == 1

        await cache.clear()
        assert len(cache) == 0

    async def test_unknown_cache_name(self) -> None:
        with pytest.raises(CacheUnavailableError):
            await InMemoryLookupCache().get("usersById", "x")


class TestRedisLookupCache:
    @pytest.fixture
    def client(self) -> AsyncMock:
        return AsyncMock()

    async def test_get_decodes_snapshot(self, client: AsyncMock) -> None:
        created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        snapshot = User(id="u-1", login="bob", created_date=created)
        client.get.return_value = json.dumps(snapshot.to_dict()).encode()
        cache = RedisLookupCache(client)

        user = await cache.get(USERS_BY_LOGIN_CACHE, "BOB")

        assert user == snapshot
        client.get.assert_awaited_once_with("cat:usersByLogin:bob")

    async def test_put_if_absent_uses_nx_and_ttl(self, client: AsyncMock) -> None:
        client.set.return_value = True
        cache = RedisLookupCache(client, ttl_seconds=60)

        stored = await cache.put_if_absent(USERS_BY_EMAIL_CACHE, "Bob@Example.com", BOB)

        assert stored == BOB
        args, kwargs = client.set.call_args
        assert args[0] == "cat:usersByEmail:bob@example.com"
        assert kwargs == {"nx": True, "ex": 60}

    async def test_put_if_absent_returns_existing_on_race(self, client: AsyncMock) -> None:
        winner = User(id="u-9", login="bob")
        client.set.return_value = None
        client.get.return_value = json.dumps(winner.to_dict())
        cache = RedisLookupCache(client)

        assert await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB) == winner

    async def test_backend_errors_become_cache_unavailable(self, client: AsyncMock) -> None:
        client.get.side_effect = RedisConnectionError("connection refused")
        client.set.side_effect = RedisConnectionError("connection refused")
        cache = RedisLookupCache(client)

        with pytest.raises(CacheUnavailableError):
            await cache.get(USERS_BY_LOGIN_CACHE, "bob")
        with pytest.raises(CacheUnavailableError):
            await cache.put_if_absent(USERS_BY_LOGIN_CACHE, "bob", BOB)

    async def test_corrupt_entry(self, client: AsyncMock) -> None:
        client.get.return_value = b"not-json"
        cache = RedisLookupCache(client)

        with pytest.raises(CacheUnavailableError):
            await cache.get(USERS_BY_LOGIN_CACHE, "bob")

"""
UserRepository lookups against an in-memory database.

Covers case-insensitive matching, positive-only caching, fail-open behaviour
when the cache backend is down, and cache eviction on writes.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.cache import (
    USERS_BY_EMAIL_CACHE,
    USERS_BY_LOGIN_CACHE,
    CacheUnavailableError,
    InMemoryLookupCache,
)
from src.infrastructure.db.models import UserModel
from src.infrastructure.repositories.users import UserRepository

from tests.utils import SeedData


async def test_login_lookup_is_case_insensitive(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)

    lower = await users.find_one_by_login_ignore_case("alice")
    upper = await users.find_one_by_login_ignore_case("ALICE")

    assert lower is not None
    assert lower == upper
    assert lower.id == seed.users["alice"]


async def test_login_lookup_does_not_match_substrings(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)

    assert await users.find_one_by_login_ignore_case("ali") is None
    assert await users.find_one_by_login_ignore_case("al.*") is None
    assert await users.find_one_by_login_ignore_case(" bob ") is None
    assert await users.find_one_by_email_ignore_case(" bob@example.com") is None
    assert len(lookup_cache) == 0


async def test_email_lookup_is_cached(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)

    found = await users.find_one_by_email_ignore_case("Bob@Example.COM")

    assert found is not None
    assert await lookup_cache.get(USERS_BY_EMAIL_CACHE, "bob@example.com") == found


async def test_positive_lookup_is_served_from_cache(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)
    first = await users.find_one_by_login_ignore_case("bob")

    # Without invalidation the cached snapshot is returned even after a rename
    row = await db.get(UserModel, seed.users["bob"])
    row.first_name = "Robert"
    await db.commit()

    second = await users.find_one_by_login_ignore_case("bob")
    assert second == first
    assert second.first_name == "Bob"


async def test_absent_lookups_are_not_cached(
    session_factory, lookup_cache: InMemoryLookupCache
) -> None:
    """Two concurrent misses for carol, then carol appears in the store."""
    misses = []
    for _ in range(2):
        session = AsyncMock()
        session.scalar.return_value = None
        misses.append(UserRepository(session, lookup_cache))

    results = await asyncio.gather(
        *(repo.find_one_by_login_ignore_case("carol") for repo in misses)
    )

    assert results == [None, None]
    assert len(lookup_cache) == 0

    async with session_factory() as session:
        users = UserRepository(session, lookup_cache)
        assert await users.find_one_by_login_ignore_case("carol") is None

        session.add(UserModel(login="carol", email="carol@example.com", activated=True))
        await session.commit()

        found = await users.find_one_by_login_ignore_case("carol")
        assert found is not None
        assert found.login == "carol"


async def test_cache_failure_falls_through_to_store(db: AsyncSession, seed: SeedData) -> None:
    broken = AsyncMock()
    broken.get.side_effect = CacheUnavailableError("redis down")
    broken.put_if_absent.side_effect = CacheUnavailableError("redis down")
    users = UserRepository(db, broken)

    found = await users.find_one_by_login_ignore_case("bob")

    assert found is not None
    assert found.id == seed.users["bob"]


async def test_cache_write_failure_still_returns_user(db: AsyncSession, seed: SeedData) -> None:
    flaky = AsyncMock()
    flaky.get.return_value = None
    flaky.put_if_absent.side_effect = CacheUnavailableError("redis down")
    users = UserRepository(db, flaky)

    found = await users.find_one_by_email_ignore_case("alice@example.com")

    assert found is not None
    assert found.login == "alice"


async def test_save_evicts_old_and_new_keys(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)
    await users.find_one_by_login_ignore_case("bob")
    await users.find_one_by_email_ignore_case("bob@example.com")
    assert len(lookup_cache) == 2

    row = await db.get(UserModel, seed.users["bob"])
    renamed = UserModel(
        id=row.id,
        login="Bobby",
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        activated=row.activated,
    )
    saved = await users.save(renamed)

    assert saved.login == "bobby"
    assert len(lookup_cache) == 0
    assert await users.find_one_by_login_ignore_case("bob") is None
    assert (await users.find_one_by_login_ignore_case("BOBBY")).id == seed.users["bob"]


async def test_save_new_user_normalizes_login_and_email(
    db: AsyncSession, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)

    saved = await users.save(UserModel(login="  Dave ", email="Dave@Example.com"))

    assert saved.id
    assert saved.login == "dave"
    assert saved.email == "dave@example.com"
    assert saved.activated is False


async def test_maintenance_queries(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)

    pending = await users.find_one_by_activation_key("12345678901234567890")
    assert pending is not None
    assert pending.login == "pending"
    assert await users.find_one_by_reset_key("missing") is None
    assert (await users.find_one_by_login("bob")).id == seed.users["bob"]

    stale = await users.find_all_not_activated_created_before(
        datetime.now(UTC) + timedelta(days=1)
    )
    assert [user.login for user in stale] == ["pending"]


async def test_delete_evicts_cache(
    db: AsyncSession, seed: SeedData, lookup_cache: InMemoryLookupCache
) -> None:
    users = UserRepository(db, lookup_cache)
    await users.find_one_by_login_ignore_case("pending")
    assert await lookup_cache.get(USERS_BY_LOGIN_CACHE, "pending") is not None

    assert await users.delete(seed.users["pending"]) is True

    assert await lookup_cache.get(USERS_BY_LOGIN_CACHE, "pending") is None
    assert await users.find_one_by_login_ignore_case("pending") is None
    assert await users.delete("missing-id") is False

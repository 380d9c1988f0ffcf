from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.models import User
from src.domain.pagination import Page, PageRequest
from src.infrastructure.cache import (
    USERS_BY_EMAIL_CACHE,
    USERS_BY_LOGIN_CACHE,
    CacheUnavailableError,
    LookupCache,
)
from src.infrastructure.db.models import UserModel

from .paging import fetch_page

if TYPE_CHECKING:
    from sqlalchemy import Select

logger = structlog.get_logger()

SORTABLE_FIELDS = {
    "id": UserModel.id,
    "login": UserModel.login,
    "email": UserModel.email,
    "createdDate": UserModel.created_date,
    "created_date": UserModel.created_date,
}


def to_domain(row: UserModel) -> User:
    return User(
        id=row.id,
        login=row.login,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        activated=row.activated,
        lang_key=row.lang_key,
        activation_key=row.activation_key,
        reset_key=row.reset_key,
        created_date=row.created_date,
        reset_date=row.reset_date,
    )


class UserRepository:
    """User queries; the login and email lookups are memoized in ``cache``."""

    def __init__(self, session: AsyncSession, cache: LookupCache) -> None:
        self.session = session
        self.cache = cache

    async def find_one_by_login_ignore_case(self, login: str) -> User | None:
        """Case-insensitive exact match on login, served from ``usersByLogin``."""
        return await self._cached(USERS_BY_LOGIN_CACHE, login, self._query_by_login)

    async def find_one_by_email_ignore_case(self, email: str) -> User | None:
        """Case-insensitive exact match on email, served from ``usersByEmail``."""
        return await self._cached(USERS_BY_EMAIL_CACHE, email, self._query_by_email)

    async def find_one_by_login(self, login: str) -> User | None:
        """Exact login match, bypassing the cache."""
        row = await self.session.scalar(select(UserModel).where(UserModel.login == login))
        return to_domain(row) if row else None

    async def find_one_by_activation_key(self, activation_key: str) -> User | None:
        row = await self.session.scalar(
            select(UserModel).where(UserModel.activation_key == activation_key)
        )
        return to_domain(row) if row else None

    async def find_one_by_reset_key(self, reset_key: str) -> User | None:
        row = await self.session.scalar(select(UserModel).where(UserModel.reset_key == reset_key))
        return to_domain(row) if row else None

    async def find_all_not_activated_created_before(self, moment: datetime) -> list[User]:
        """Users that never activated and still hold an activation key issued before ``moment``."""
        stmt: Select[tuple[UserModel]] = select(UserModel).where(
            UserModel.activated.is_(False),
            UserModel.activation_key.is_not(None),
            UserModel.created_date < moment,
        )
        rows = (await self.session.execute(stmt)).scalars().all()
        return [to_domain(row) for row in rows]

    async def find_all_activated(self, request: PageRequest) -> Page[User]:
        stmt: Select[tuple[UserModel]] = select(UserModel).where(UserModel.activated.is_(True))
        page = await fetch_page(
            self.session,
            stmt,
            request,
            sortable=SORTABLE_FIELDS,
            tiebreaker=UserModel.id,
        )
        return Page(
            content=[to_domain(row) for row in page.content],
            total_elements=page.total_elements,
            page=page.page,
            size=page.size,
        )

    async def exists(self, user_id: str) -> bool:
        found = await self.session.scalar(select(UserModel.id).where(UserModel.id == user_id))
        return found is not None

    async def save(self, row: UserModel) -> User:
        """Insert or update a user and evict its lookup cache entries."""
        stale_keys: list[tuple[str, str]] = []
        if row.id:
            previous = (
                await self.session.execute(
                    select(UserModel.login, UserModel.email).where(UserModel.id == row.id)
                )
            ).first()
            if previous is not None:
                stale_keys.append((USERS_BY_LOGIN_CACHE, previous.login))
                if previous.email:
                    stale_keys.append((USERS_BY_EMAIL_CACHE, previous.email))

        row.login = row.login.strip().lower()
        if row.email:
            row.email = row.email.strip().lower()
        row = await self.session.merge(row)
        await self.session.commit()
        await self.session.refresh(row)

        stale_keys.append((USERS_BY_LOGIN_CACHE, row.login))
        if row.email:
            stale_keys.append((USERS_BY_EMAIL_CACHE, row.email))
        for cache_name, key in stale_keys:
            await self._evict(cache_name, key)
        logger.debug("user_saved", user_id=row.id, login=row.login)
        return to_domain(row)

    async def delete(self, user_id: str) -> bool:
        """Delete a user and evict its lookup cache entries."""
        row = await self.session.get(UserModel, user_id)
        if row is None:
            return False
        login, email = row.login, row.email
        await self.session.delete(row)
        await self.session.commit()

        await self._evict(USERS_BY_LOGIN_CACHE, login)
        if email:
            await self._evict(USERS_BY_EMAIL_CACHE, email)
        return True

    async def _query_by_login(self, login: str) -> User | None:
        row = await self.session.scalar(
            select(UserModel).where(func.lower(UserModel.login) == login.lower())
        )
        return to_domain(row) if row else None

    async def _query_by_email(self, email: str) -> User | None:
        row = await self.session.scalar(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        )
        return to_domain(row) if row else None

    async def _cached(
        self,
        cache_name: str,
        key: str,
        loader: Callable[[str], Awaitable[User | None]],
    ) -> User | None:
        try:
            cached = await self.cache.get(cache_name, key)
        except CacheUnavailableError as exc:
            logger.warning("lookup_cache_unavailable", cache=cache_name, error=str(exc))
            return await loader(key)

        if cached is not None:
            return cached

        user = await loader(key)
        if user is None:
            # Absent results are never cached
            return None

        try:
            return await self.cache.put_if_absent(cache_name, key, user)
        except CacheUnavailableError as exc:
            logger.warning("lookup_cache_unavailable", cache=cache_name, error=str(exc))
            return user

    async def _evict(self, cache_name: str, key: str) -> None:
        try:
            await self.cache.evict(cache_name, key)
        except CacheUnavailableError as exc:
            logger.warning("lookup_cache_evict_failed", cache=cache_name, error=str(exc))

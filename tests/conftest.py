from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session, get_lookup_cache
from src.api.main import app
from src.domain.reference_data import DEMO_ASSESSMENTS, DEMO_USERS
from src.infrastructure.cache import InMemoryLookupCache
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import AssessmentModel, SubmissionModel, UserModel

from tests.utils import SeedData


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def lookup_cache() -> InMemoryLookupCache:
    return InMemoryLookupCache()


@pytest.fixture()
async def seed(session_factory: async_sessionmaker[AsyncSession]) -> SeedData:
    """Demo users and assessments plus three submissions.

    bob -> quiz1, alice -> quiz1, alice -> assignment
    """
    data = SeedData()
    async with session_factory() as session:
        for user in DEMO_USERS:
            row = UserModel(**user)
            session.add(row)
            await session.flush()
            data.users[row.login] = row.id
        for assessment in DEMO_ASSESSMENTS:
            row = AssessmentModel(**assessment)
            session.add(row)
            await session.flush()
            data.assessments[row.type] = row.id
        for login, assessment_type in (
            ("bob", "quiz1"),
            ("alice", "quiz1"),
            ("alice", "assignment"),
        ):
            row = SubmissionModel(
                user_id=data.users[login],
                assessment_id=data.assessments[assessment_type],
                github_url=f"https://github.com/{login}/{assessment_type}",
            )
            session.add(row)
            await session.flush()
            data.submissions[(login, assessment_type)] = row.id
        await session.commit()
    return data


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    lookup_cache: InMemoryLookupCache,
) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the in-memory database and a fresh lookup cache."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_lookup_cache] = lambda: lookup_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_lookup_cache, None)

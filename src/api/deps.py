from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Collection

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.config import get_settings
from src.domain.pagination import PageRequest
from src.domain.services import (
    AssessmentService,
    EntityLookup,
    SubmissionQueryResolver,
    SubmissionService,
    UserService,
)
from src.infrastructure.cache import LookupCache
from src.infrastructure.db.session import get_session
from src.infrastructure.repositories.assessments import SORTABLE_FIELDS as ASSESSMENT_SORT_FIELDS
from src.infrastructure.repositories.assessments import AssessmentRepository
from src.infrastructure.repositories.submissions import SORTABLE_FIELDS as SUBMISSION_SORT_FIELDS
from src.infrastructure.repositories.submissions import SubmissionRepository
from src.infrastructure.repositories.users import SORTABLE_FIELDS as USER_SORT_FIELDS
from src.infrastructure.repositories.users import UserRepository


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_lookup_cache(request: Request) -> LookupCache:
    """Return the process-wide lookup cache owned by the application."""
    return request.app.state.lookup_cache


def page_request_dependency(sortable: Collection[str]) -> Callable[..., PageRequest]:
    """Build a dependency that accepts only sort keys listed in ``sortable``.

    Every check happens while the request is parsed, so an invalid page index,
    size or sort key is rejected before any lookup or store query.
    """
    allowed = frozenset(sortable)

    def get_page_request(
        page: int = Query(0, description="Zero-based page index"),
        size: int | None = Query(None, description="Page size"),
        sort: list[str] | None = Query(None, description="Sort keys as field or field,asc|desc"),
    ) -> PageRequest:
        settings = get_settings()
        return PageRequest.of(
            page=page,
            size=settings.default_page_size if size is None else size,
            sort=sort or (),
            max_size=settings.max_page_size,
        ).require_sortable(allowed)

    return get_page_request


get_submission_page_request = page_request_dependency(SUBMISSION_SORT_FIELDS)
get_assessment_page_request = page_request_dependency(ASSESSMENT_SORT_FIELDS)
get_user_page_request = page_request_dependency(USER_SORT_FIELDS)


def get_user_repository(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
    cache: LookupCache = Depends(get_lookup_cache),  # noqa: B008
) -> UserRepository:
    return UserRepository(session, cache)


def get_assessment_service(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> AssessmentService:
    return AssessmentService(AssessmentRepository(session))


def get_submission_service(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
    users: UserRepository = Depends(get_user_repository),  # noqa: B008
) -> SubmissionService:
    assessments = AssessmentRepository(session)
    submissions = SubmissionRepository(session)
    resolver = SubmissionQueryResolver(EntityLookup(users, assessments), submissions)
    return SubmissionService(submissions, users, assessments, resolver)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),  # noqa: B008
) -> UserService:
    return UserService(users)

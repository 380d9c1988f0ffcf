"""
Submission filter resolution.

Listing requests carry an optional ``user`` (login) and an optional ``type``
(assessment type). The pair is classified once into one of four cases and
each case resolves its filters to ids before the submission store is read.
A filter that cannot be resolved yields an empty page, never an error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from src.domain.pagination import Page, PageRequest
from src.infrastructure.repositories.submissions import SubmissionFilter, SubmissionRepository

from .lookup import EntityLookup

if TYPE_CHECKING:
    from src.infrastructure.db.models import SubmissionModel

logger = structlog.get_logger()


@dataclass(slots=True, frozen=True)
class Both:
    user: str
    type: str


@dataclass(slots=True, frozen=True)
class UserOnly:
    user: str


@dataclass(slots=True, frozen=True)
class TypeOnly:
    type: str


@dataclass(slots=True, frozen=True)
class Neither:
    pass


FilterCase = Both | UserOnly | TypeOnly | Neither


def classify(user: str | None, type_: str | None) -> FilterCase:
    """Map the optional query parameters onto a filter case.

    Precedence is fixed: both, then user only, then type only, then neither.
    """
    if user is not None and type_ is not None:
        return Both(user=user, type=type_)
    if user is not None:
        return UserOnly(user=user)
    if type_ is not None:
        return TypeOnly(type=type_)
    return Neither()


class SubmissionQueryResolver:
    """Turns optional listing filters into a paginated submission query."""

    def __init__(self, lookup: EntityLookup, submissions: SubmissionRepository) -> None:
        self.lookup = lookup
        self.submissions = submissions

    async def resolve(
        self,
        user: str | None,
        type_: str | None,
        request: PageRequest,
    ) -> Page[SubmissionModel]:
        """Primary listing: no filter means every submission."""
        case = classify(user, type_)
        filter_ = await self._resolve_filter(case)
        if filter_ is None:
            logger.info("submission_filter_unresolved", case=type(case).__name__)
            return Page.empty(request)
        return await self.submissions.find_page(filter_, request)

    async def search(
        self,
        user: str | None,
        type_: str | None,
        request: PageRequest,
    ) -> Page[SubmissionModel]:
        """Search listing: one filter at a time, user first; no filter means no results."""
        case = classify(user, type_)
        match case:
            case Both(user=login) | UserOnly(user=login):
                filter_ = await self._resolve_filter(UserOnly(user=login))
            case TypeOnly():
                filter_ = await self._resolve_filter(case)
            case Neither():
                filter_ = None

        if filter_ is None:
            return Page.empty(request)
        return await self.submissions.find_page(filter_, request)

    async def _resolve_filter(self, case: FilterCase) -> SubmissionFilter | None:
        """Resolve every filter in ``case``; ``None`` when any of them is unknown."""
        match case:
            case Both(user=login, type=assessment_type):
                user = await self.lookup.find_user_by_login_pattern(login)
                if user is None:
                    return None
                assessment = await self.lookup.find_assessment_by_type_pattern(assessment_type)
                if assessment is None:
                    return None
                return SubmissionFilter(user_id=user.id, assessment_id=assessment.id)
            case UserOnly(user=login):
                user = await self.lookup.find_user_by_login_pattern(login)
                if user is None:
                    return None
                return SubmissionFilter(user_id=user.id)
            case TypeOnly(type=assessment_type):
                assessment = await self.lookup.find_assessment_by_type_pattern(assessment_type)
                if assessment is None:
                    return None
                return SubmissionFilter(assessment_id=assessment.id)
            case Neither():
                return SubmissionFilter()
        raise TypeError(f"Unsupported filter case: {case!r}")

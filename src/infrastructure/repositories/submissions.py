from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.pagination import Page, PageRequest
from src.infrastructure.db.models import SubmissionModel

from .paging import fetch_page

if TYPE_CHECKING:
    from sqlalchemy import Select

SORTABLE_FIELDS = {
    "id": SubmissionModel.id,
    "submittedAt": SubmissionModel.submitted_at,
    "submitted_at": SubmissionModel.submitted_at,
    "status": SubmissionModel.status,
    "points": SubmissionModel.points,
    "userId": SubmissionModel.user_id,
    "assessmentId": SubmissionModel.assessment_id,
}


@dataclass(slots=True, frozen=True)
class SubmissionFilter:
    """Resolved filter; ``None`` fields are not constrained."""

    user_id: str | None = None
    assessment_id: str | None = None


class SubmissionRepository:
    """Persistence queries for submissions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_page(self, filter_: SubmissionFilter, request: PageRequest) -> Page[SubmissionModel]:
        stmt: Select[tuple[SubmissionModel]] = select(SubmissionModel)
        if filter_.user_id is not None:
            stmt = stmt.where(SubmissionModel.user_id == filter_.user_id)
        if filter_.assessment_id is not None:
            stmt = stmt.where(SubmissionModel.assessment_id == filter_.assessment_id)
        return await fetch_page(
            self.session,
            stmt,
            request,
            sortable=SORTABLE_FIELDS,
            tiebreaker=SubmissionModel.id,
        )

    async def get(self, submission_id: str) -> SubmissionModel | None:
        return await self.session.get(SubmissionModel, submission_id)

    async def exists(self, submission_id: str) -> bool:
        found = await self.session.scalar(
            select(SubmissionModel.id).where(SubmissionModel.id == submission_id)
        )
        return found is not None

    async def add(self, submission: SubmissionModel) -> SubmissionModel:
        self.session.add(submission)
        await self.session.commit()
        await self.session.refresh(submission)
        return submission

    async def save(self, submission: SubmissionModel) -> SubmissionModel:
        await self.session.commit()
        await self.session.refresh(submission)
        return submission

    async def delete(self, submission_id: str) -> bool:
        submission = await self.get(submission_id)
        if submission is None:
            return False
        await self.session.delete(submission)
        await self.session.commit()
        return True

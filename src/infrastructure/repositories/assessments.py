from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from src.domain.pagination import Page, PageRequest
from src.infrastructure.db.models import AssessmentModel

from .paging import fetch_page

if TYPE_CHECKING:
    from sqlalchemy import Select

SORTABLE_FIELDS = {
    "id": AssessmentModel.id,
    "type": AssessmentModel.type,
    "title": AssessmentModel.title,
    "createdDate": AssessmentModel.created_date,
    "created_date": AssessmentModel.created_date,
    "totalPoints": AssessmentModel.total_points,
}


class AssessmentRepository:
    """Persistence queries for assessments."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_first_by_type_ignore_case(self, type_: str) -> AssessmentModel | None:
        """Return one assessment whose type equals ``type_`` ignoring case.

        Types are not unique; the first row in store order wins and that order
        is not guaranteed to be stable.
        """
        stmt: Select[tuple[AssessmentModel]] = (
            select(AssessmentModel)
            .where(func.lower(AssessmentModel.type) == type_.lower())
            .limit(1)
        )
        return await self.session.scalar(stmt)

    async def find_page(self, type_: str | None, request: PageRequest) -> Page[AssessmentModel]:
        stmt: Select[tuple[AssessmentModel]] = select(AssessmentModel)
        if type_ is not None:
            stmt = stmt.where(func.lower(AssessmentModel.type) == type_.lower())
        return await fetch_page(
            self.session,
            stmt,
            request,
            sortable=SORTABLE_FIELDS,
            tiebreaker=AssessmentModel.id,
        )

    async def get(self, assessment_id: str) -> AssessmentModel | None:
        return await self.session.get(AssessmentModel, assessment_id)

    async def exists(self, assessment_id: str) -> bool:
        found = await self.session.scalar(
            select(AssessmentModel.id).where(AssessmentModel.id == assessment_id)
        )
        return found is not None

    async def add(self, assessment: AssessmentModel) -> AssessmentModel:
        self.session.add(assessment)
        await self.session.commit()
        await self.session.refresh(assessment)
        return assessment

    async def save(self, assessment: AssessmentModel) -> AssessmentModel:
        await self.session.commit()
        await self.session.refresh(assessment)
        return assessment

    async def delete(self, assessment_id: str) -> bool:
        assessment = await self.get(assessment_id)
        if assessment is None:
            return False
        await self.session.delete(assessment)
        await self.session.commit()
        return True

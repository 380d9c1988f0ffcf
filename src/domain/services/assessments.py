from __future__ import annotations

from typing import Any

import structlog
from src.domain.pagination import Page, PageRequest
from src.infrastructure.db.models import AssessmentModel
from src.infrastructure.repositories.assessments import AssessmentRepository

logger = structlog.get_logger()

UPDATABLE_FIELDS = ("type", "title", "description", "total_points", "time_limit_minutes")


class AssessmentService:
    """Domain logic for assessment CRUD and listing."""

    def __init__(self, assessments: AssessmentRepository) -> None:
        self.assessments = assessments

    async def create(self, data: dict[str, Any]) -> AssessmentModel:
        assessment = AssessmentModel(**{key: data.get(key) for key in UPDATABLE_FIELDS})
        assessment = await self.assessments.add(assessment)
        logger.info("assessment_created", assessment_id=assessment.id, type=assessment.type)
        return assessment

    async def update(self, assessment_id: str, data: dict[str, Any]) -> AssessmentModel | None:
        """Replace every updatable field with the supplied values."""
        assessment = await self.assessments.get(assessment_id)
        if assessment is None:
            return None
        for key in UPDATABLE_FIELDS:
            setattr(assessment, key, data.get(key))
        assessment = await self.assessments.save(assessment)
        logger.info("assessment_updated", assessment_id=assessment_id)
        return assessment

    async def partial_update(
        self, assessment_id: str, data: dict[str, Any]
    ) -> AssessmentModel | None:
        """Apply only the fields present and not null in ``data``."""
        assessment = await self.assessments.get(assessment_id)
        if assessment is None:
            return None
        changed = [key for key in UPDATABLE_FIELDS if data.get(key) is not None]
        for key in changed:
            setattr(assessment, key, data[key])
        assessment = await self.assessments.save(assessment)
        logger.info("assessment_partially_updated", assessment_id=assessment_id, fields=changed)
        return assessment

    async def find_one(self, assessment_id: str) -> AssessmentModel | None:
        return await self.assessments.get(assessment_id)

    async def exists(self, assessment_id: str) -> bool:
        return await self.assessments.exists(assessment_id)

    async def list_assessments(
        self, type_: str | None, request: PageRequest
    ) -> Page[AssessmentModel]:
        page = await self.assessments.find_page(type_, request)
        logger.info(
            "assessments_listed",
            type=type_,
            page=request.page,
            size=request.size,
            total=page.total_elements,
        )
        return page

    async def delete(self, assessment_id: str) -> None:
        deleted = await self.assessments.delete(assessment_id)
        logger.info("assessment_deleted", assessment_id=assessment_id, existed=deleted)

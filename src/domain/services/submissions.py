"""
Submission CRUD and listing.

Listing goes through SubmissionQueryResolver; grading and repository checks
happen elsewhere.
"""

from __future__ import annotations

from typing import Any

import structlog
from src.domain.errors import EntityNotFoundError
from src.domain.pagination import Page, PageRequest
from src.infrastructure.db.models import SubmissionModel, SubmissionStatus
from src.infrastructure.repositories.assessments import AssessmentRepository
from src.infrastructure.repositories.submissions import SubmissionRepository
from src.infrastructure.repositories.users import UserRepository

from .submission_query import SubmissionQueryResolver

logger = structlog.get_logger()

CONTENT_FIELDS = ("github_url", "submitted_file_url", "status", "points", "analysis_result")
UPDATABLE_FIELDS = ("user_id", "assessment_id", *CONTENT_FIELDS)


class SubmissionService:
    """Domain logic for submission CRUD and filtered listing."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        users: UserRepository,
        assessments: AssessmentRepository,
        resolver: SubmissionQueryResolver,
    ) -> None:
        self.submissions = submissions
        self.users = users
        self.assessments = assessments
        self.resolver = resolver

    async def create(self, data: dict[str, Any]) -> SubmissionModel:
        await self._ensure_references(data["user_id"], data["assessment_id"])
        values = {key: data.get(key) for key in UPDATABLE_FIELDS}
        values["status"] = values["status"] or SubmissionStatus.SUBMITTED
        submission = await self.submissions.add(SubmissionModel(**values))
        logger.info(
            "submission_created",
            submission_id=submission.id,
            user_id=submission.user_id,
            assessment_id=submission.assessment_id,
        )
        return submission

    async def update(self, submission_id: str, data: dict[str, Any]) -> SubmissionModel | None:
        submission = await self.submissions.get(submission_id)
        if submission is None:
            return None
        await self._ensure_references(data["user_id"], data["assessment_id"])
        for key in UPDATABLE_FIELDS:
            setattr(submission, key, data.get(key))
        if submission.status is None:
            submission.status = SubmissionStatus.SUBMITTED
        submission = await self.submissions.save(submission)
        logger.info("submission_updated", submission_id=submission_id)
        return submission

    async def partial_update(
        self, submission_id: str, data: dict[str, Any]
    ) -> SubmissionModel | None:
        submission = await self.submissions.get(submission_id)
        if submission is None:
            return None
        changed = [key for key in UPDATABLE_FIELDS if data.get(key) is not None]
        if "user_id" in changed or "assessment_id" in changed:
            await self._ensure_references(
                data.get("user_id") or submission.user_id,
                data.get("assessment_id") or submission.assessment_id,
            )
        for key in changed:
            setattr(submission, key, data[key])
        submission = await self.submissions.save(submission)
        logger.info("submission_partially_updated", submission_id=submission_id, fields=changed)
        return submission

    async def find_one(self, submission_id: str) -> SubmissionModel | None:
        return await self.submissions.get(submission_id)

    async def exists(self, submission_id: str) -> bool:
        return await self.submissions.exists(submission_id)

    async def list_submissions(
        self, user: str | None, type_: str | None, request: PageRequest
    ) -> Page[SubmissionModel]:
        page = await self.resolver.resolve(user, type_, request)
        logger.info(
            "submissions_listed",
            user=user,
            type=type_,
            page=request.page,
            size=request.size,
            total=page.total_elements,
        )
        return page

    async def search_submissions(
        self, user: str | None, type_: str | None, request: PageRequest
    ) -> Page[SubmissionModel]:
        page = await self.resolver.search(user, type_, request)
        logger.info(
            "submissions_searched",
            user=user,
            type=type_,
            total=page.total_elements,
        )
        return page

    async def delete(self, submission_id: str) -> None:
        deleted = await self.submissions.delete(submission_id)
        logger.info("submission_deleted", submission_id=submission_id, existed=deleted)

    async def _ensure_references(self, user_id: str, assessment_id: str) -> None:
        if not await self.users.exists(user_id):
            raise EntityNotFoundError("user", user_id)
        if not await self.assessments.exists(assessment_id):
            raise EntityNotFoundError("assessment", assessment_id)

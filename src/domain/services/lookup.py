from __future__ import annotations

import structlog
from src.domain.models import User
from src.infrastructure.db.models import AssessmentModel
from src.infrastructure.repositories.assessments import AssessmentRepository
from src.infrastructure.repositories.users import UserRepository

logger = structlog.get_logger()


class EntityLookup:
    """Resolve human-supplied identifiers (login, assessment type) to entities.

    Both lookups are case-insensitive matches on the whole field value; the
    pattern is compared literally and never interpreted as a regular
    expression.
    """

    def __init__(self, users: UserRepository, assessments: AssessmentRepository) -> None:
        self.users = users
        self.assessments = assessments

    async def find_user_by_login_pattern(self, pattern: str) -> User | None:
        user = await self.users.find_one_by_login_ignore_case(pattern)
        logger.debug("lookup_user_by_login", pattern=pattern, found=user is not None)
        return user

    async def find_assessment_by_type_pattern(self, pattern: str) -> AssessmentModel | None:
        assessment = await self.assessments.find_first_by_type_ignore_case(pattern)
        logger.debug("lookup_assessment_by_type", pattern=pattern, found=assessment is not None)
        return assessment

"""Domain services."""

from src.domain.services.assessments import AssessmentService
from src.domain.services.lookup import EntityLookup
from src.domain.services.submission_query import (
    Both,
    FilterCase,
    Neither,
    SubmissionQueryResolver,
    TypeOnly,
    UserOnly,
    classify,
)
from src.domain.services.submissions import SubmissionService
from src.domain.services.users import UserService

__all__ = [
    "AssessmentService",
    "Both",
    "EntityLookup",
    "FilterCase",
    "Neither",
    "SubmissionQueryResolver",
    "SubmissionService",
    "TypeOnly",
    "UserOnly",
    "UserService",
    "classify",
]

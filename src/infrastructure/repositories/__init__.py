"""Repositories: explicit query functions over the relational store."""

from src.infrastructure.repositories.assessments import AssessmentRepository
from src.infrastructure.repositories.submissions import SubmissionFilter, SubmissionRepository
from src.infrastructure.repositories.users import UserRepository

__all__ = [
    "AssessmentRepository",
    "SubmissionFilter",
    "SubmissionRepository",
    "UserRepository",
]

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from src.infrastructure.db.models import SubmissionStatus


class SubmissionBase(BaseModel):
    github_url: str | None = Field(None, max_length=512)
    submitted_file_url: str | None = Field(None, max_length=512)
    status: SubmissionStatus | None = None
    points: float | None = Field(None, ge=0)
    analysis_result: str | None = None


class SubmissionCreate(SubmissionBase):
    id: str | None = None
    user_id: str = Field(..., min_length=1)
    assessment_id: str = Field(..., min_length=1)


class SubmissionUpdate(SubmissionBase):
    id: str | None = None
    user_id: str = Field(..., min_length=1)
    assessment_id: str = Field(..., min_length=1)


class SubmissionPatch(SubmissionBase):
    """Partial update; null or missing fields are left untouched."""

    id: str | None = None
    user_id: str | None = None
    assessment_id: str | None = None


class SubmissionDetail(SubmissionBase):
    id: str
    user_id: str
    assessment_id: str
    status: SubmissionStatus
    submitted_at: datetime

    model_config = ConfigDict(from_attributes=True)

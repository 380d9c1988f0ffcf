from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AssessmentBase(BaseModel):
    type: str = Field(..., min_length=1, max_length=64, description="Free-text category")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    total_points: int | None = Field(None, ge=0)
    time_limit_minutes: int | None = Field(None, ge=1)


class AssessmentCreate(AssessmentBase):
    id: str | None = None


class AssessmentUpdate(AssessmentBase):
    id: str | None = None


class AssessmentPatch(BaseModel):
    id: str | None = None
    type: str | None = Field(None, min_length=1, max_length=64)
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    total_points: int | None = Field(None, ge=0)
    time_limit_minutes: int | None = Field(None, ge=1)


class AssessmentDetail(AssessmentBase):
    id: str
    created_date: datetime

    model_config = ConfigDict(from_attributes=True)

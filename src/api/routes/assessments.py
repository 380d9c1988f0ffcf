from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from src.api.deps import get_assessment_page_request, get_assessment_service
from src.api.errors import BadRequestAlertError
from src.api.headers import (
    entity_creation_alert,
    entity_deletion_alert,
    entity_update_alert,
    pagination_headers,
)
from src.api.schemas.assessments import (
    AssessmentCreate,
    AssessmentDetail,
    AssessmentPatch,
    AssessmentUpdate,
)
from src.domain.pagination import PageRequest
from src.domain.services import AssessmentService

router = APIRouter(prefix="/assessments", tags=["Assessments"])

ENTITY_NAME = "assessment"


@router.post("", response_model=AssessmentDetail, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    payload: AssessmentCreate,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentDetail:
    """Create a new assessment."""
    if payload.id is not None:
        raise BadRequestAlertError(
            "A new assessment cannot already have an ID", ENTITY_NAME, "idexists"
        )
    assessment = await service.create(payload.model_dump(exclude={"id"}))

    response.headers["Location"] = f"/assessments/{assessment.id}"
    response.headers.update(entity_creation_alert(ENTITY_NAME, assessment.id))
    return AssessmentDetail.model_validate(assessment)


@router.put("/{assessment_id}", response_model=AssessmentDetail)
async def update_assessment(
    assessment_id: str,
    payload: AssessmentUpdate,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentDetail:
    _check_ids(assessment_id, payload.id)
    if not await service.exists(assessment_id):
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")

    assessment = await service.update(assessment_id, payload.model_dump(exclude={"id"}))
    if assessment is None:
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")

    response.headers.update(entity_update_alert(ENTITY_NAME, assessment_id))
    return AssessmentDetail.model_validate(assessment)


@router.patch("/{assessment_id}", response_model=AssessmentDetail)
async def partial_update_assessment(
    assessment_id: str,
    payload: AssessmentPatch,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentDetail:
    """Update the given fields of an assessment; null fields are ignored."""
    _check_ids(assessment_id, payload.id)
    if not await service.exists(assessment_id):
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")

    assessment = await service.partial_update(
        assessment_id, payload.model_dump(exclude={"id"}, exclude_unset=True)
    )
    if assessment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")

    response.headers.update(entity_update_alert(ENTITY_NAME, assessment_id))
    return AssessmentDetail.model_validate(assessment)


@router.get("", response_model=list[AssessmentDetail])
async def list_assessments(
    request: Request,
    response: Response,
    type: str | None = Query(None, description="Exact assessment type, any case"),  # noqa: A002
    page_request: PageRequest = Depends(get_assessment_page_request),
    service: AssessmentService = Depends(get_assessment_service),
) -> list[AssessmentDetail]:
    """Return a page of assessments, optionally restricted to one type."""
    page = await service.list_assessments(type, page_request)
    response.headers.update(pagination_headers(request.url, page))
    return [AssessmentDetail.model_validate(item) for item in page.content]


@router.get("/{assessment_id}", response_model=AssessmentDetail)
async def get_assessment(
    assessment_id: str,
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentDetail:
    assessment = await service.find_one(assessment_id)
    if assessment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
    return AssessmentDetail.model_validate(assessment)


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_assessment(
    assessment_id: str,
    response: Response,
    service: AssessmentService = Depends(get_assessment_service),
) -> None:
    """Delete an assessment together with its submissions."""
    await service.delete(assessment_id)
    response.headers.update(entity_deletion_alert(ENTITY_NAME, assessment_id))


def _check_ids(path_id: str, body_id: str | None) -> None:
    if body_id is None:
        raise BadRequestAlertError("Invalid id", ENTITY_NAME, "idnull")
    if body_id != path_id:
        raise BadRequestAlertError("Invalid ID", ENTITY_NAME, "idinvalid")

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from src.api.deps import get_submission_page_request, get_submission_service
from src.api.errors import BadRequestAlertError
from src.api.headers import (
    entity_creation_alert,
    entity_deletion_alert,
    entity_update_alert,
    pagination_headers,
)
from src.api.schemas.submissions import (
    SubmissionCreate,
    SubmissionDetail,
    SubmissionPatch,
    SubmissionUpdate,
)
from src.domain.errors import EntityNotFoundError
from src.domain.pagination import PageRequest
from src.domain.services import SubmissionService

router = APIRouter(prefix="/submissions", tags=["Submissions"])

ENTITY_NAME = "submission"


@router.post("", response_model=SubmissionDetail, status_code=status.HTTP_201_CREATED)
async def create_submission(
    payload: SubmissionCreate,
    response: Response,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetail:
    """Create a new submission."""
    if payload.id is not None:
        raise BadRequestAlertError(
            "A new submission cannot already have an ID", ENTITY_NAME, "idexists"
        )
    try:
        submission = await service.create(payload.model_dump(exclude={"id"}))
    except EntityNotFoundError as exc:
        raise BadRequestAlertError(str(exc), ENTITY_NAME, f"{exc.entity_name}notfound") from exc

    response.headers["Location"] = f"/submissions/{submission.id}"
    response.headers.update(entity_creation_alert(ENTITY_NAME, submission.id))
    return SubmissionDetail.model_validate(submission)


@router.put("/{submission_id}", response_model=SubmissionDetail)
async def update_submission(
    submission_id: str,
    payload: SubmissionUpdate,
    response: Response,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetail:
    """Replace an existing submission."""
    _check_ids(submission_id, payload.id)
    if not await service.exists(submission_id):
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")
    try:
        submission = await service.update(submission_id, payload.model_dump(exclude={"id"}))
    except EntityNotFoundError as exc:
        raise BadRequestAlertError(str(exc), ENTITY_NAME, f"{exc.entity_name}notfound") from exc
    if submission is None:
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")

    response.headers.update(entity_update_alert(ENTITY_NAME, submission_id))
    return SubmissionDetail.model_validate(submission)


@router.patch("/{submission_id}", response_model=SubmissionDetail)
async def partial_update_submission(
    submission_id: str,
    payload: SubmissionPatch,
    response: Response,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetail:
    """Update the given fields of a submission; null fields are ignored."""
    _check_ids(submission_id, payload.id)
    if not await service.exists(submission_id):
        raise BadRequestAlertError("Entity not found", ENTITY_NAME, "idnotfound")
    try:
        submission = await service.partial_update(
            submission_id, payload.model_dump(exclude={"id"}, exclude_unset=True)
        )
    except EntityNotFoundError as exc:
        raise BadRequestAlertError(str(exc), ENTITY_NAME, f"{exc.entity_name}notfound") from exc
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")

    response.headers.update(entity_update_alert(ENTITY_NAME, submission_id))
    return SubmissionDetail.model_validate(submission)


@router.get("", response_model=list[SubmissionDetail])
async def list_submissions(
    request: Request,
    response: Response,
    user: str | None = Query(None, description="Student login"),
    type: str | None = Query(None, description="Assessment type"),  # noqa: A002
    page_request: PageRequest = Depends(get_submission_page_request),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionDetail]:
    """List submissions, optionally filtered by student login and assessment type.

    Without filters every submission is returned, one page at a time.
    """
    page = await service.list_submissions(user, type, page_request)
    response.headers.update(pagination_headers(request.url, page))
    return [SubmissionDetail.model_validate(item) for item in page.content]


@router.get("/search", response_model=list[SubmissionDetail])
async def search_submissions(
    request: Request,
    response: Response,
    user: str | None = Query(None, description="Student login"),
    type: str | None = Query(None, description="Assessment type"),  # noqa: A002
    page_request: PageRequest = Depends(get_submission_page_request),
    service: SubmissionService = Depends(get_submission_service),
) -> list[SubmissionDetail]:
    """Search submissions by a single filter; user wins over type.

    Unlike ``GET /submissions`` a request without filters returns an empty list.
    """
    page = await service.search_submissions(user, type, page_request)
    response.headers.update(pagination_headers(request.url, page))
    return [SubmissionDetail.model_validate(item) for item in page.content]


@router.get("/{submission_id}", response_model=SubmissionDetail)
async def get_submission(
    submission_id: str,
    service: SubmissionService = Depends(get_submission_service),
) -> SubmissionDetail:
    submission = await service.find_one(submission_id)
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return SubmissionDetail.model_validate(submission)


@router.delete("/{submission_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_submission(
    submission_id: str,
    response: Response,
    service: SubmissionService = Depends(get_submission_service),
) -> None:
    await service.delete(submission_id)
    response.headers.update(entity_deletion_alert(ENTITY_NAME, submission_id))


def _check_ids(path_id: str, body_id: str | None) -> None:
    if body_id is None:
        raise BadRequestAlertError("Invalid id", ENTITY_NAME, "idnull")
    if body_id != path_id:
        raise BadRequestAlertError("Invalid ID", ENTITY_NAME, "idinvalid")

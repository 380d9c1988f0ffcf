from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from src.api.deps import get_user_page_request, get_user_service
from src.api.headers import pagination_headers
from src.api.schemas.users import PublicUser
from src.domain.pagination import PageRequest
from src.domain.services import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[PublicUser])
async def list_public_users(
    request: Request,
    response: Response,
    page_request: PageRequest = Depends(get_user_page_request),
    service: UserService = Depends(get_user_service),
) -> list[PublicUser]:
    """Return a page of activated users."""
    page = await service.list_public_users(page_request)
    response.headers.update(pagination_headers(request.url, page))
    return [PublicUser.model_validate(user) for user in page.content]

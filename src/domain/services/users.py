from __future__ import annotations

from src.domain.models import User
from src.domain.pagination import Page, PageRequest
from src.infrastructure.repositories.users import UserRepository


class UserService:
    """Read-side user queries exposed publicly."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    async def list_public_users(self, request: PageRequest) -> Page[User]:
        return await self.users.find_all_activated(request)

"""Domain layer: entities, pagination primitives and services."""

from src.domain.models import User
from src.domain.pagination import InvalidPageRequestError, Page, PageRequest, SortOrder

__all__ = ["InvalidPageRequestError", "Page", "PageRequest", "SortOrder", "User"]

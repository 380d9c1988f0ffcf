"""
Pagination primitives shared by repositories and the HTTP layer.

A PageRequest is validated when it is built, so an invalid one never reaches
a repository.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class InvalidPageRequestError(ValueError):
    """Raised for malformed pagination parameters (index, size or sort key)."""


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(slots=True, frozen=True)
class SortOrder:
    field: str
    direction: Direction = Direction.ASC

    @classmethod
    def parse(cls, raw: str) -> SortOrder:
        """Parse a ``field`` or ``field,asc|desc`` sort expression."""
        name, _, direction = raw.partition(",")
        name = name.strip()
        if not name:
            raise InvalidPageRequestError(f"Invalid sort expression: '{raw}'")
        direction = direction.strip().lower() or Direction.ASC.value
        try:
            return cls(field=name, direction=Direction(direction))
        except ValueError as exc:
            raise InvalidPageRequestError(f"Invalid sort direction: '{direction}'") from exc


@dataclass(slots=True, frozen=True)
class PageRequest:
    """Zero-based page index, page size and ordered sort keys."""

    page: int = 0
    size: int = 20
    sort: tuple[SortOrder, ...] = ()
    max_size: int = 2000

    def __post_init__(self) -> None:
        if self.page < 0:
            raise InvalidPageRequestError(f"Page index must not be negative, got {self.page}")
        if self.size < 1:
            raise InvalidPageRequestError(f"Page size must be positive, got {self.size}")
        if self.size > self.max_size:
            raise InvalidPageRequestError(
                f"Page size must not exceed {self.max_size}, got {self.size}"
            )

    @classmethod
    def of(
        cls,
        page: int = 0,
        size: int = 20,
        sort: Sequence[str] = (),
        *,
        max_size: int = 2000,
    ) -> PageRequest:
        orders = tuple(SortOrder.parse(raw) for raw in sort if raw)
        return cls(page=page, size=size, sort=orders, max_size=max_size)

    def require_sortable(self, allowed: Collection[str]) -> PageRequest:
        """Reject sort keys outside ``allowed``; returns ``self`` so it can be chained."""
        for order in self.sort:
            if order.field not in allowed:
                raise InvalidPageRequestError(
                    f"Cannot sort by '{order.field}'; allowed fields: {', '.join(sorted(allowed))}"
                )
        return self

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """A slice of a result set plus the total size of the filtered set."""

    content: list[T]
    total_elements: int
    page: int
    size: int

    @classmethod
    def empty(cls, request: PageRequest) -> Page[T]:
        return cls(content=[], total_elements=0, page=request.page, size=request.size)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 1
        return math.ceil(self.total_elements / self.size)

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0

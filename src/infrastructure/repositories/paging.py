from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from src.domain.pagination import Direction, InvalidPageRequestError, Page, PageRequest

T = TypeVar("T")


def order_clauses(
    request: PageRequest,
    sortable: Mapping[str, InstrumentedAttribute[Any]],
    tiebreaker: InstrumentedAttribute[Any],
) -> list[Any]:
    """Translate sort keys to ORDER BY clauses, always ending with ``tiebreaker``.

    Unknown fields raise InvalidPageRequestError before any statement runs.
    """
    clauses: list[Any] = []
    for order in request.sort:
        column = sortable.get(order.field)
        if column is None:
            allowed = ", ".join(sorted(sortable))
            raise InvalidPageRequestError(
                f"Cannot sort by '{order.field}'; allowed fields: {allowed}"
            )
        clauses.append(column.desc() if order.direction is Direction.DESC else column.asc())
    clauses.append(tiebreaker.asc())
    return clauses


async def fetch_page(
    session: AsyncSession,
    stmt: Select[tuple[T]],
    request: PageRequest,
    *,
    sortable: Mapping[str, InstrumentedAttribute[Any]],
    tiebreaker: InstrumentedAttribute[Any],
) -> Page[T]:
    """Run ``stmt`` as a count query plus one page of ordered rows."""
    ordering = order_clauses(request, sortable, tiebreaker)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = await session.scalar(count_stmt) or 0

    page_stmt = stmt.order_by(*ordering).offset(request.offset).limit(request.size)
    rows = list((await session.execute(page_stmt)).scalars().all())
    return Page(content=rows, total_elements=total, page=request.page, size=request.size)

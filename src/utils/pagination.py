"""
Cursor Pagination.

Keyset pagination over a single ORM model. Cursors are entity ids: `after`
returns the rows that follow the cursor entity in the requested order and
`before` the rows that precede it. The sort column is always paired with the
primary key so rows sharing a sort value still have a total order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from sqlalchemy import and_, func, inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.errors import InvalidInputException, NotFoundException

T = TypeVar("T")


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class CursorPage(Generic[T]):
    """One page of results plus what the caller needs to fetch the next."""
    items: List[T]
    total_count: int
    has_more: bool


def _seek(sort_col, id_col, value, anchor_id, greater: bool):
    if greater:
        return or_(sort_col > value, and_(sort_col == value, id_col > anchor_id))
    return or_(sort_col < value, and_(sort_col == value, id_col < anchor_id))


async def _load_anchor(session: AsyncSession, model, filters, cursor_id: str):
    # The anchor must itself be visible under the same filters.
    anchor = await session.scalar(
        select(model).where(model.id == cursor_id, *filters)
    )
    if anchor is None:
        raise NotFoundException(model.__name__, cursor_id)
    return anchor


async def get_list_cursor(
    session: AsyncSession,
    model,
    filters: Sequence[Any],
    *,
    limit: int,
    order: SortOrder = SortOrder.DESC,
    order_by: str = "created_at",
    after: Optional[str] = None,
    before: Optional[str] = None,
) -> CursorPage:
    """
    Fetch one page of `model` rows matching `filters`.

    Args:
        session: Active async session
        model: Mapped class with an `id` primary key
        filters: SQL expressions AND-ed into every query (including the count)
        limit: Maximum number of rows to return
        order: Sort direction
        order_by: Mapped column attribute to sort by
        after: Return rows after this entity id
        before: Return rows before this entity id

    Returns:
        CursorPage with the rows in requested order
    """
    if order_by not in inspect(model).columns:
        raise InvalidInputException(
            f"Cannot order by '{order_by}'", details={"order_by": order_by}
        )

    sort_col = getattr(model, order_by)
    id_col = model.id
    descending = SortOrder(order) == SortOrder.DESC

    stmt = select(model).where(*filters)

    if after is not None:
        anchor = await _load_anchor(session, model, filters, after)
        stmt = stmt.where(
            _seek(sort_col, id_col, getattr(anchor, order_by), anchor.id, greater=not descending)
        )
    if before is not None:
        anchor = await _load_anchor(session, model, filters, before)
        stmt = stmt.where(
            _seek(sort_col, id_col, getattr(anchor, order_by), anchor.id, greater=descending)
        )

    # Walking backwards from `before` means reading in the opposite direction
    # and flipping the page afterwards.
    reverse = before is not None and after is None
    fetch_descending = descending != reverse
    if fetch_descending:
        stmt = stmt.order_by(sort_col.desc(), id_col.desc())
    else:
        stmt = stmt.order_by(sort_col.asc(), id_col.asc())

    rows = list((await session.scalars(stmt.limit(limit + 1))).all())
    has_more = len(rows) > limit
    rows = rows[:limit]
    if reverse:
        rows.reverse()

    total_count = await session.scalar(
        select(func.count()).select_from(model).where(*filters)
    )

    return CursorPage(items=rows, total_count=total_count or 0, has_more=has_more)


def create_paginated_response(
    page: CursorPage, to_dto: Callable[[Any], Dict[str, Any]]
) -> Dict[str, Any]:
    """List envelope shared by all collection endpoints."""
    data = [to_dto(item) for item in page.items]
    return {
        "object": "list",
        "data": data,
        "first_id": data[0]["id"] if data else None,
        "last_id": data[-1]["id"] if data else None,
        "has_more": page.has_more,
        "total_count": page.total_count,
    }

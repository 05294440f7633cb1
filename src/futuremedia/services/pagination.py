"""Cursor pagination shared by every list endpoint.

Items are ordered newest first by `(created_at, id)`. The cursor is the id of
the first item of the page to return; the id of the row fetched beyond the
current page becomes the next cursor.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.orm import Session

from futuremedia.core.errors import BadRequestError

T = TypeVar("T")

__all__ = ["CursorPage", "paginate"]


@dataclass
class CursorPage(Generic[T]):
    """Rows of one page plus the continuation token."""

    items: list[T]
    next_cursor: str | None = None


def paginate(
    db: Session,
    stmt: Select[Any],
    model: Any,
    *,
    limit: int,
    cursor: str | None = None,
) -> CursorPage[Any]:
    """Run `stmt` as one page of at most `limit` rows.

    Args:
        db: Database session.
        stmt: Filtered select of `model` rows, without ordering or limit.
        model: Mapped class exposing `id` and `created_at` columns.
        limit: Page size; callers validate bounds before reaching here.
        cursor: Id of the first row to include, from a previous `next_cursor`.

    Returns:
        The page rows in newest-first order and the next cursor, if any.

    Raises:
        BadRequestError: If the cursor does not identify an existing row.
    """
    if cursor is not None:
        anchor = db.execute(
            select(model.created_at, model.id).where(model.id == cursor)
        ).first()
        if anchor is None:
            raise BadRequestError("Invalid cursor")
        stmt = stmt.where(
            or_(
                model.created_at < anchor.created_at,
                and_(model.created_at == anchor.created_at, model.id <= anchor.id),
            )
        )

    stmt = stmt.order_by(model.created_at.desc(), model.id.desc()).limit(limit + 1)
    rows = list(db.scalars(stmt).unique().all())

    next_cursor: str | None = None
    if len(rows) > limit:
        next_cursor = rows.pop().id
    return CursorPage(items=rows, next_cursor=next_cursor)

"""Notification endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import Page, SuccessResponse
from futuremedia.schemas.notification import (
    BulkUpdateResponse,
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from futuremedia.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=Page[NotificationResponse])
async def list_notifications(
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(20, ge=1, le=100, description="Maximum number of notifications to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
    only_unread: bool = Query(False, description="Restrict to unread notifications"),
) -> Page[NotificationResponse]:
    """List the caller's notifications, newest first."""
    page = notification_service.list_notifications(
        db, caller, limit=limit, cursor=cursor, only_unread=only_unread
    )
    return Page(
        items=[NotificationResponse.model_validate(n) for n in page.items],
        next_cursor=page.next_cursor,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(caller: CallerDep, db: SessionDep) -> UnreadCountResponse:
    return UnreadCountResponse(count=notification_service.unread_count(db, caller))


@router.put("/read-all", response_model=BulkUpdateResponse)
async def mark_all_as_read(caller: CallerDep, db: SessionDep) -> BulkUpdateResponse:
    """Mark every unread notification of the caller as read."""
    return BulkUpdateResponse(count=notification_service.mark_all_as_read(db, caller))


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str, caller: CallerDep, db: SessionDep
) -> NotificationResponse:
    notification = notification_service.mark_as_read(db, caller, notification_id)
    return NotificationResponse.model_validate(notification)


@router.post("/", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    payload: NotificationCreate, caller: CallerDep, db: SessionDep
) -> NotificationResponse:
    """Send a notification from the caller to another user."""
    notification = notification_service.create_notification(db, caller, payload)
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: str, caller: CallerDep, db: SessionDep
) -> SuccessResponse:
    notification_service.delete_notification(db, caller, notification_id)
    return SuccessResponse()

"""Notification fan-out and the notification read model."""
from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from futuremedia.core.caller import Caller
from futuremedia.core.errors import BadRequestError, ForbiddenError, NotFoundError
from futuremedia.db.session import unit_of_work
from futuremedia.models import (
    ALLOWED_TARGETS,
    Comment,
    Message,
    Notification,
    NotificationType,
    Post,
    Reel,
    Story,
    TargetKind,
    TargetRef,
    User,
)
from futuremedia.schemas.notification import NotificationCreate
from futuremedia.services.pagination import CursorPage, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "check_target",
    "fan_out",
    "list_notifications",
    "unread_count",
    "mark_as_read",
    "mark_all_as_read",
    "create_notification",
    "delete_notification",
]

_TARGET_MODELS = {
    TargetKind.POST: Post,
    TargetKind.COMMENT: Comment,
    TargetKind.STORY: Story,
    TargetKind.REEL: Reel,
    TargetKind.MESSAGE: Message,
}


def check_target(type_: NotificationType, target: TargetRef | None) -> None:
    """Reject a reference that does not fit the notification type."""
    if target is None:
        return
    if target.kind not in ALLOWED_TARGETS[type_]:
        raise BadRequestError(
            f"A {type_.value} notification cannot reference a {target.kind.value}"
        )


def fan_out(
    db: Session,
    *,
    actor_id: str,
    owner_id: str,
    type_: NotificationType,
    content: str,
    target: TargetRef | None = None,
) -> Notification | None:
    """Queue a notification to `owner_id` about something `actor_id` did.

    The row is added to the caller's unit of work and is committed together
    with the triggering write. Acting on your own content notifies nobody.

    Returns:
        The pending Notification, or None when suppressed.
    """
    if actor_id == owner_id:
        logger.debug("Suppressed %s notification for self-action by %s", type_.value, actor_id)
        return None

    check_target(type_, target)
    notification = Notification(
        type=type_.value,
        content=content,
        receiver_id=owner_id,
        sender_id=actor_id,
        target=target,
    )
    db.add(notification)
    db.flush()
    logger.info("Fan-out %s notification %s -> %s", type_.value, actor_id, owner_id)
    return notification


def list_notifications(
    db: Session,
    caller: Caller,
    *,
    limit: int,
    cursor: str | None = None,
    only_unread: bool = False,
) -> CursorPage[Notification]:
    """Return the caller's notifications, newest first."""
    user_id = caller.require()
    stmt = select(Notification).where(Notification.receiver_id == user_id)
    if only_unread:
        stmt = stmt.where(Notification.is_read.is_(False))
    return paginate(db, stmt, Notification, limit=limit, cursor=cursor)


def unread_count(db: Session, caller: Caller) -> int:
    """Count the caller's unread notifications."""
    user_id = caller.require()
    return db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.receiver_id == user_id, Notification.is_read.is_(False))
    ) or 0


def _get_owned(db: Session, caller: Caller, notification_id: str, action: str) -> Notification:
    user_id = caller.require()
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.receiver_id != user_id:
        raise ForbiddenError(f"You do not have permission to {action} this notification")
    return notification


def mark_as_read(db: Session, caller: Caller, notification_id: str) -> Notification:
    """Flip one notification to read after checking the caller receives it."""
    notification = _get_owned(db, caller, notification_id, "mark as read")
    with unit_of_work(db):
        notification.is_read = True
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, caller: Caller) -> int:
    """Mark every unread notification of the caller as read.

    Returns:
        Number of rows updated.
    """
    user_id = caller.require()
    with unit_of_work(db):
        result = db.execute(
            update(Notification)
            .where(Notification.receiver_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
    return result.rowcount or 0


def create_notification(db: Session, caller: Caller, data: NotificationCreate) -> Notification:
    """Create a notification from the caller to another user.

    Raises:
        BadRequestError: More than one reference, or one that does not fit the type.
        NotFoundError: Unknown receiver or referenced item.
    """
    sender_id = caller.require()
    type_ = NotificationType(data.type)

    targets = data.targets()
    if len(targets) > 1:
        raise BadRequestError("A notification may reference at most one item")
    target = targets[0] if targets else None
    check_target(type_, target)

    if db.get(User, data.receiver_id) is None:
        raise NotFoundError("Receiver not found")
    if target is not None and db.get(_TARGET_MODELS[target.kind], target.id) is None:
        raise NotFoundError(f"Referenced {target.kind.value} not found")

    notification = Notification(
        type=type_.value,
        content=data.content,
        receiver_id=data.receiver_id,
        sender_id=sender_id,
        target=target,
    )
    with unit_of_work(db):
        db.add(notification)
    db.refresh(notification)
    return notification


def delete_notification(db: Session, caller: Caller, notification_id: str) -> None:
    """Delete one of the caller's notifications."""
    notification = _get_owned(db, caller, notification_id, "delete")
    with unit_of_work(db):
        db.delete(notification)

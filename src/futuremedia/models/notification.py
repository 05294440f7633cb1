# src/futuremedia/models/notification.py
"""Notification records addressed to a single receiver."""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futuremedia.db.ids import new_id
from futuremedia.db.session import Base
from futuremedia.db.time import utcnow
from futuremedia.models.message import Message
from futuremedia.models.post import Comment, Post
from futuremedia.models.reel import Reel
from futuremedia.models.story import Story
from futuremedia.models.target import TargetKind, TargetMixin, populated_targets_sql
from futuremedia.models.user import User


class NotificationType(enum.StrEnum):
    """Discriminator for what triggered a notification."""

    LIKE = "LIKE"
    COMMENT = "COMMENT"
    FOLLOW = "FOLLOW"
    MENTION = "MENTION"
    STORY_VIEW = "STORY_VIEW"
    REEL_VIEW = "REEL_VIEW"
    NEW_POST = "NEW_POST"
    NEW_STORY = "NEW_STORY"
    NEW_REEL = "NEW_REEL"
    SYSTEM = "SYSTEM"
    # Only produced by reaction fan-out, never accepted from clients.
    REACTION = "REACTION"


_ANY_CONTENT = frozenset(TargetKind)

# Target kinds a notification of each type may reference. No target is always allowed.
ALLOWED_TARGETS: dict[NotificationType, frozenset[TargetKind]] = {
    NotificationType.LIKE: frozenset({TargetKind.POST, TargetKind.COMMENT}),
    NotificationType.COMMENT: frozenset({TargetKind.POST, TargetKind.COMMENT}),
    NotificationType.FOLLOW: frozenset(),
    NotificationType.MENTION: _ANY_CONTENT,
    NotificationType.STORY_VIEW: frozenset({TargetKind.STORY}),
    NotificationType.REEL_VIEW: frozenset({TargetKind.REEL}),
    NotificationType.NEW_POST: frozenset({TargetKind.POST}),
    NotificationType.NEW_STORY: frozenset({TargetKind.STORY}),
    NotificationType.NEW_REEL: frozenset({TargetKind.REEL}),
    NotificationType.SYSTEM: frozenset(),
    NotificationType.REACTION: _ANY_CONTENT,
}


class Notification(TargetMixin, Base):
    """Derived record created as a side effect of another user's action.

    Deleting the receiver deletes the notification; deleting the sender only
    clears `sender_id`.
    """

    __tablename__ = "notification"
    __table_args__ = (
        CheckConstraint(f"{populated_targets_sql()} <= 1", name="ck_notification_single_target"),
        Index("ix_notification_receiver_read", "receiver_id", "is_read"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    receiver_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="SET NULL"),
        nullable=True,
    )

    sender: Mapped[User | None] = relationship("User", foreign_keys=[sender_id], lazy="joined")

    # Read-only views of the referenced item for list payloads.
    post: Mapped[Post | None] = relationship("Post", viewonly=True, lazy="selectin")
    comment: Mapped[Comment | None] = relationship("Comment", viewonly=True, lazy="selectin")
    story: Mapped[Story | None] = relationship("Story", viewonly=True, lazy="selectin")
    reel: Mapped[Reel | None] = relationship("Reel", viewonly=True, lazy="selectin")
    message: Mapped[Message | None] = relationship("Message", viewonly=True, lazy="selectin")

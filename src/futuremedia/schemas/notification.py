"""Notification-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from futuremedia.models.target import TARGET_COLUMNS, TargetRef

from .common import TargetOut, UserSummary

# REACTION is generated by the server only and is not accepted here.
CreatableNotificationType = Literal[
    "LIKE",
    "COMMENT",
    "FOLLOW",
    "MENTION",
    "STORY_VIEW",
    "REEL_VIEW",
    "NEW_POST",
    "NEW_STORY",
    "NEW_REEL",
    "SYSTEM",
]


class NotificationCreate(BaseModel):
    """Schema for creating a notification addressed to another user."""

    receiver_id: str
    type: CreatableNotificationType
    content: str = Field(..., max_length=500)
    post_id: str | None = None
    comment_id: str | None = None
    story_id: str | None = None
    reel_id: str | None = None
    message_id: str | None = None

    def targets(self) -> list[TargetRef]:
        """Return every populated reference field as a tagged value."""
        return [
            TargetRef(kind=kind, id=getattr(self, column))
            for kind, (column, _) in TARGET_COLUMNS.items()
            if getattr(self, column) is not None
        ]


class NotifiedPost(BaseModel):
    id: str
    caption: str | None = None
    content_url: str | None = None
    content_type: str

    model_config = ConfigDict(from_attributes=True)


class NotifiedComment(BaseModel):
    id: str
    content: str

    model_config = ConfigDict(from_attributes=True)


class NotifiedStory(BaseModel):
    id: str
    media_url: str
    media_type: str

    model_config = ConfigDict(from_attributes=True)


class NotifiedReel(BaseModel):
    id: str
    video_url: str
    caption: str | None = None

    model_config = ConfigDict(from_attributes=True)


class NotifiedMessage(BaseModel):
    id: str
    content: str
    content_type: str

    model_config = ConfigDict(from_attributes=True)


class NotificationResponse(BaseModel):
    """Schema for notification information returned by the API."""

    id: str
    type: str
    content: str
    is_read: bool
    created_at: datetime
    receiver_id: str
    sender_id: str | None
    sender: UserSummary | None = None
    target: TargetOut | None = None
    # Short summary of whichever item `target` points at.
    post: NotifiedPost | None = None
    comment: NotifiedComment | None = None
    story: NotifiedStory | None = None
    reel: NotifiedReel | None = None
    message: NotifiedMessage | None = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    """Number of unread notifications for the caller."""

    count: int


class BulkUpdateResponse(BaseModel):
    """Number of rows touched by a bulk update."""

    count: int

"""Messaging-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import ReactionResponse, UserSummary

MessageContentType = Literal["text", "image", "video", "audio"]


class MessageCreate(BaseModel):
    """Schema for sending a direct message."""

    receiver_id: str
    content: str = Field(..., min_length=1, max_length=10000)
    content_type: MessageContentType = "text"


class GroupMessageCreate(BaseModel):
    """Schema for posting into a group chat."""

    content: str = Field(..., min_length=1, max_length=10000)
    content_type: MessageContentType = "text"


class MessageResponse(BaseModel):
    """A direct or group message."""

    id: str
    sender_id: str
    receiver_id: str | None
    group_id: str | None
    content: str
    content_type: str
    read_at: datetime | None
    created_at: datetime
    sender: UserSummary
    reactions: list[ReactionResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(BaseModel):
    """Latest state of a one-to-one conversation."""

    user: UserSummary | None
    last_message: MessageResponse | None
    unread_count: int


class GroupCreate(BaseModel):
    """Schema for creating a group chat."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    image_url: str | None = None
    member_ids: list[str] = Field(default_factory=list)


class GroupMemberResponse(BaseModel):
    """Group membership entry."""

    user: UserSummary
    role: str
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupResponse(BaseModel):
    """Group with its members."""

    id: str
    name: str
    description: str | None
    image_url: str | None
    created_at: datetime
    members: list[GroupMemberResponse]

    model_config = ConfigDict(from_attributes=True)

"""Story-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import UserSummary


class StoryCreate(BaseModel):
    """Schema for publishing a story."""

    media_url: str = Field(..., min_length=1)
    media_type: Literal["image", "video"]
    duration: int | None = Field(None, ge=1, description="Display duration in seconds")


class StoryResponse(BaseModel):
    """A story as seen by the caller."""

    id: str
    media_url: str
    media_type: str
    duration: int | None
    created_at: datetime
    expires_at: datetime
    user: UserSummary
    is_viewed: bool = False

    model_config = ConfigDict(from_attributes=True)


class StoryGroup(BaseModel):
    """Active stories of one author."""

    user: UserSummary
    stories: list[StoryResponse]
    has_unseen_stories: bool


class StoryViewer(BaseModel):
    """Someone who opened a story, with their reaction if any."""

    viewer: UserSummary
    viewed_at: datetime
    reaction: str | None = None

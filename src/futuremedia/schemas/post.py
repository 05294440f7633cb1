"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import UserSummary

PostContentType = Literal["image", "video", "text", "3d", "mixed"]
PostVisibility = Literal["public", "friends", "private"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    caption: str | None = Field(None, max_length=5000)
    content_url: str | None = None
    content_type: PostContentType
    ipfs_hash: str | None = None
    visibility: PostVisibility = "public"
    tags: list[str] | None = Field(None, description="Tag names; created on first use")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    caption: str | None
    content_url: str | None
    content_type: str
    ipfs_hash: str | None
    integrity_hash: str | None
    visibility: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary
    tags: list[str] = Field(default_factory=list)
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    """Schema for commenting on a post."""

    content: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """A comment with its author."""

    id: str
    post_id: str
    content: str
    created_at: datetime
    user: UserSummary

    model_config = ConfigDict(from_attributes=True)


class PostDetailResponse(PostResponse):
    """Single post with its comments, newest first."""

    comments: list[CommentResponse] = Field(default_factory=list)


class ReactionResult(BaseModel):
    """Outcome of a toggle-style reaction request."""

    success: bool = True
    action: Literal["added", "updated", "removed"]


class ConvertPostTypeRequest(BaseModel):
    """Change the media type of an existing post."""

    target_type: Literal["image", "video", "text", "3d", "audio"]
    new_content_url: str | None = None

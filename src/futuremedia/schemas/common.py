"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from futuremedia.models.target import TargetKind

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a cursor-paginated listing."""

    items: list[T]
    next_cursor: str | None = Field(
        None,
        description="Id of the first item of the next page; absent on the last page.",
    )


class UserSummary(BaseModel):
    """Public identity fields embedded in other payloads."""

    id: str
    name: str | None = None
    username: str
    image: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TargetOut(BaseModel):
    """Tagged reference to a content entity."""

    kind: TargetKind
    id: str

    model_config = ConfigDict(from_attributes=True)


class ReactionCreate(BaseModel):
    """Schema for reacting to a piece of content."""

    type: str = Field(..., min_length=1, max_length=32, description="Emoji or reaction name")


class ReactionResponse(BaseModel):
    """A single reaction with its author."""

    id: str
    type: str
    created_at: datetime
    user: UserSummary

    model_config = ConfigDict(from_attributes=True)


class SuccessResponse(BaseModel):
    """Acknowledgement for mutations without a richer payload."""

    success: bool = True

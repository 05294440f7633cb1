"""Reel-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import ReactionResponse, UserSummary

TrendingTimeframe = Literal["day", "week", "month"]


class ReelCreate(BaseModel):
    """Schema for publishing a reel."""

    video_url: str = Field(..., min_length=1)
    caption: str | None = Field(None, max_length=2200)
    sound_name: str | None = None


class ReelResponse(BaseModel):
    """A reel with reaction summary for the caller."""

    id: str
    video_url: str
    caption: str | None
    sound_name: str | None
    created_at: datetime
    user: UserSummary
    reaction_count: int = 0
    user_reaction: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReelDetailResponse(ReelResponse):
    """A reel with its most recent reactions."""

    reactions: list[ReactionResponse] = Field(default_factory=list)


class TrendingReelsResponse(BaseModel):
    """Reels ranked by reactions received in a time window."""

    reels: list[ReelResponse]

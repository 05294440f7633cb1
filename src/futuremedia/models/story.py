# src/futuremedia/models/story.py
"""SQLAlchemy models for ephemeral stories and their views."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futuremedia.db.ids import new_id
from futuremedia.db.session import Base
from futuremedia.db.time import utcnow
from futuremedia.models.user import User


class Story(Base):
    """Short-lived media item.

    Rows past `expires_at` are filtered out of every read but never purged.
    """

    __tablename__ = "story"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    media_url: Mapped[str] = mapped_column(Text, nullable=False)
    # image or video
    media_type: Mapped[str] = mapped_column(String(16), nullable=False)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False, index=True)

    user: Mapped[User] = relationship("User", lazy="joined")


class StoryView(Base):
    """Records that a viewer opened a story; at most one per pair."""

    __tablename__ = "story_view"
    __table_args__ = (
        UniqueConstraint("story_id", "viewer_id", name="uq_story_view_story_viewer"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    story_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("story.id", ondelete="CASCADE"),
        nullable=False,
    )
    viewer_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    viewed_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    viewer: Mapped[User] = relationship("User", lazy="joined")

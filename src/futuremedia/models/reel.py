# src/futuremedia/models/reel.py
"""SQLAlchemy model for short-form video reels."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futuremedia.db.ids import new_id
from futuremedia.db.session import Base
from futuremedia.db.time import utcnow
from futuremedia.models.user import User


class Reel(Base):
    """Short video published to the reel feed."""

    __tablename__ = "reel"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    video_url: Mapped[str] = mapped_column(Text, nullable=False)
    caption: Mapped[str | None] = mapped_column(Text, nullable=True)
    sound_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False, index=True)

    user: Mapped[User] = relationship("User", lazy="joined")

# src/futuremedia/models/reaction.py
"""Emoji reactions on any kind of content."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futuremedia.db.ids import new_id
from futuremedia.db.session import Base
from futuremedia.db.time import utcnow
from futuremedia.models.target import TARGET_COLUMNS, TargetMixin, populated_targets_sql
from futuremedia.models.user import User


class Reaction(TargetMixin, Base):
    """A user's reaction to exactly one content entity.

    Each user holds at most one reaction per entity; changing the emoji
    updates the row in place.
    """

    __tablename__ = "reaction"
    __table_args__ = (
        CheckConstraint(f"{populated_targets_sql()} = 1", name="ck_reaction_single_target"),
        *(
            UniqueConstraint("user_id", column, name=f"uq_reaction_user_{column}")
            for column, _ in TARGET_COLUMNS.values()
        ),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    user: Mapped[User] = relationship("User", lazy="joined")

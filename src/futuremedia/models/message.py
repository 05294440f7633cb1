# src/futuremedia/models/message.py
"""Models describing direct and group messages between users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from futuremedia.db.ids import new_id
from futuremedia.db.session import Base
from futuremedia.db.time import utcnow
from futuremedia.models.user import User


class Group(Base):
    """Named chat room with a member list."""

    __tablename__ = "chat_group"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow, nullable=False)

    members: Mapped[list[GroupMember]] = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class GroupMember(Base):
    """Membership edge between a user and a group."""

    __tablename__ = "group_member"
    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_group_member_user_group"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    group_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("chat_group.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # admin or member
    role: Mapped[str] = mapped_column(String(16), nullable=False, default="member")
    joined_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    group: Mapped[Group] = relationship("Group", back_populates="members")
    user: Mapped[User] = relationship("User", lazy="joined")


class Message(Base):
    """Plain-content message.

    Direct messages carry a receiver and no group; group messages carry a
    group and no receiver.
    """

    __tablename__ = "message"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    sender_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    receiver_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    group_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("chat_group.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # text, image, video or audio
    content_type: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    sender: Mapped[User] = relationship("User", foreign_keys=[sender_id], lazy="joined")

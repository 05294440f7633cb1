"""initial schema

Revision ID: 5c1e2a9d7b40
Revises:
Create Date: 2026-10-19 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a9d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_TARGETS = (
    ("post_id", "post"),
    ("comment_id", "comment"),
    ("story_id", "story"),
    ("reel_id", "reel"),
    ("message_id", "message"),
)
_POPULATED = " + ".join(
    f"(CASE WHEN {column} IS NOT NULL THEN 1 ELSE 0 END)" for column, _ in _TARGETS
)


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=32), nullable=False)


def _user_fk(name: str, *, nullable: bool = False, ondelete: str = "CASCADE") -> sa.Column:
    return sa.Column(
        name,
        sa.String(length=32),
        sa.ForeignKey("user_account.id", ondelete=ondelete),
        nullable=nullable,
    )


def _target_columns() -> list[sa.Column]:
    return [
        sa.Column(column, sa.String(length=32), sa.ForeignKey(f"{table}.id", ondelete="CASCADE"))
        for column, table in _TARGETS
    ]


def _index_targets(table: str) -> None:
    for column, _ in _TARGETS:
        op.create_index(f"ix_{table}_{column}", table, [column])


def upgrade() -> None:
    """Create every FutureMedia table."""
    op.create_table(
        "user_account",
        _id(),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("cover_image", sa.Text(), nullable=True),
        sa.Column("hashed_password", sa.Text(), nullable=True),
        sa.Column("reputation_score", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
        sa.UniqueConstraint("username"),
    )
    op.create_table(
        "follow",
        _id(),
        _user_fk("follower_id"),
        _user_fk("following_id"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )
    op.create_index("ix_follow_follower_id", "follow", ["follower_id"])
    op.create_index("ix_follow_following_id", "follow", ["following_id"])

    op.create_table(
        "tag",
        _id(),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "post",
        _id(),
        _user_fk("user_id"),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("content_url", sa.Text(), nullable=True),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("ipfs_hash", sa.Text(), nullable=True),
        sa.Column("integrity_hash", sa.Text(), nullable=True),
        sa.Column("visibility", sa.String(length=16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_user_id", "post", ["user_id"])
    op.create_index("ix_post_created_at", "post", ["created_at"])
    op.create_table(
        "post_tag",
        sa.Column("post_id", sa.String(length=32), sa.ForeignKey("post.id", ondelete="CASCADE")),
        sa.Column("tag_id", sa.String(length=32), sa.ForeignKey("tag.id", ondelete="CASCADE")),
        sa.PrimaryKeyConstraint("post_id", "tag_id"),
    )
    op.create_table(
        "comment",
        _id(),
        sa.Column(
            "post_id",
            sa.String(length=32),
            sa.ForeignKey("post.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("user_id"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_table(
        "post_like",
        _id(),
        _user_fk("user_id"),
        sa.Column(
            "post_id",
            sa.String(length=32),
            sa.ForeignKey("post.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "post_id", name="uq_post_like_user_post"),
    )
    op.create_index("ix_post_like_post_id", "post_like", ["post_id"])

    op.create_table(
        "story",
        _id(),
        _user_fk("user_id"),
        sa.Column("media_url", sa.Text(), nullable=False),
        sa.Column("media_type", sa.String(length=16), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_story_user_id", "story", ["user_id"])
    op.create_index("ix_story_expires_at", "story", ["expires_at"])
    op.create_table(
        "story_view",
        _id(),
        sa.Column(
            "story_id",
            sa.String(length=32),
            sa.ForeignKey("story.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk("viewer_id"),
        sa.Column("viewed_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("story_id", "viewer_id", name="uq_story_view_story_viewer"),
    )

    op.create_table(
        "reel",
        _id(),
        _user_fk("user_id"),
        sa.Column("video_url", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("sound_name", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reel_user_id", "reel", ["user_id"])
    op.create_index("ix_reel_created_at", "reel", ["created_at"])

    op.create_table(
        "chat_group",
        _id(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "group_member",
        _id(),
        _user_fk("user_id"),
        sa.Column(
            "group_id",
            sa.String(length=32),
            sa.ForeignKey("chat_group.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", sa.String(length=16), nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "group_id", name="uq_group_member_user_group"),
    )
    op.create_index("ix_group_member_group_id", "group_member", ["group_id"])
    op.create_table(
        "message",
        _id(),
        _user_fk("sender_id"),
        _user_fk("receiver_id", nullable=True),
        sa.Column(
            "group_id",
            sa.String(length=32),
            sa.ForeignKey("chat_group.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_type", sa.String(length=16), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_message_sender_id", "message", ["sender_id"])
    op.create_index("ix_message_receiver_id", "message", ["receiver_id"])
    op.create_index("ix_message_group_id", "message", ["group_id"])

    op.create_table(
        "reaction",
        _id(),
        sa.Column("type", sa.String(length=32), nullable=False),
        _user_fk("user_id"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        *_target_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(f"{_POPULATED} = 1", name="ck_reaction_single_target"),
        *(
            sa.UniqueConstraint("user_id", column, name=f"uq_reaction_user_{column}")
            for column, _ in _TARGETS
        ),
    )
    _index_targets("reaction")

    op.create_table(
        "notification",
        _id(),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        _user_fk("receiver_id"),
        _user_fk("sender_id", nullable=True, ondelete="SET NULL"),
        *_target_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(f"{_POPULATED} <= 1", name="ck_notification_single_target"),
    )
    op.create_index("ix_notification_receiver_read", "notification", ["receiver_id", "is_read"])
    _index_targets("notification")


def downgrade() -> None:
    """Drop every FutureMedia table."""
    for table in (
        "notification",
        "reaction",
        "message",
        "group_member",
        "chat_group",
        "reel",
        "story_view",
        "story",
        "post_like",
        "comment",
        "post_tag",
        "post",
        "tag",
        "follow",
        "user_account",
    ):
        op.drop_table(table)

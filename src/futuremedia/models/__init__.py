# src/futuremedia/models/__init__.py
"""SQLAlchemy models for the FutureMedia application."""

from .message import Group, GroupMember, Message
from .notification import ALLOWED_TARGETS, Notification, NotificationType
from .post import Comment, Like, Post, Tag, post_tag
from .reaction import Reaction
from .reel import Reel
from .story import Story, StoryView
from .target import TargetKind, TargetRef
from .user import Follow, User

__all__ = [
    "Group", "GroupMember", "Message",
    "ALLOWED_TARGETS", "Notification", "NotificationType",
    "Comment", "Like", "Post", "Tag", "post_tag",
    "Reaction",
    "Reel",
    "Story", "StoryView",
    "TargetKind", "TargetRef",
    "User", "Follow",
]

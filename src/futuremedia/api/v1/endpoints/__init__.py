"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reels import router as reels_router
from .stories import router as stories_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "users_router",
    "posts_router",
    "stories_router",
    "reels_router",
    "messages_router",
    "notifications_router",
]

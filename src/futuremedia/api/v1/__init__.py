"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    messages_router,
    notifications_router,
    posts_router,
    reels_router,
    stories_router,
    users_router,
)

__all__ = [
    "auth_router",
    "users_router",
    "posts_router",
    "stories_router",
    "reels_router",
    "messages_router",
    "notifications_router",
]

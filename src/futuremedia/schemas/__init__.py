# src/futuremedia/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import Page, ReactionCreate, ReactionResponse, SuccessResponse, TargetOut, UserSummary
from .message import (
    ConversationSummary,
    GroupCreate,
    GroupMessageCreate,
    GroupResponse,
    MessageCreate,
    MessageResponse,
)
from .notification import (
    BulkUpdateResponse,
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from .post import (
    CommentCreate,
    CommentResponse,
    ConvertPostTypeRequest,
    PostCreate,
    PostDetailResponse,
    PostResponse,
    ReactionResult,
)
from .reel import ReelCreate, ReelDetailResponse, ReelResponse, TrendingReelsResponse
from .story import StoryCreate, StoryGroup, StoryResponse, StoryViewer
from .user import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
)

__all__ = [
    "Page", "ReactionCreate", "ReactionResponse", "SuccessResponse", "TargetOut", "UserSummary",
    "ConversationSummary", "GroupCreate", "GroupMessageCreate", "GroupResponse",
    "MessageCreate", "MessageResponse",
    "BulkUpdateResponse", "NotificationCreate", "NotificationResponse", "UnreadCountResponse",
    "CommentCreate", "CommentResponse", "ConvertPostTypeRequest",
    "PostCreate", "PostDetailResponse", "PostResponse", "ReactionResult",
    "ReelCreate", "ReelDetailResponse", "ReelResponse", "TrendingReelsResponse",
    "StoryCreate", "StoryGroup", "StoryResponse", "StoryViewer",
    "LoginRequest", "LoginResponse", "MeResponse", "ProfileResponse",
    "ProfileUpdateRequest", "RegisterRequest", "RegisterResponse",
]

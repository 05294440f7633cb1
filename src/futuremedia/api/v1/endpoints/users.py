"""Profile and follow-graph endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import Page, SuccessResponse, UserSummary
from futuremedia.schemas.post import PostResponse
from futuremedia.schemas.reel import ReelResponse
from futuremedia.schemas.story import StoryResponse
from futuremedia.schemas.user import MeResponse, ProfileResponse, ProfileUpdateRequest
from futuremedia.services import posts as post_service
from futuremedia.services import reels as reel_service
from futuremedia.services import stories as story_service
from futuremedia.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=MeResponse)
async def get_me(caller: CallerDep, db: SessionDep) -> MeResponse:
    """Return the authenticated user's profile."""
    return user_service.get_me(db, caller)


@router.patch("/me", response_model=MeResponse)
async def update_me(
    payload: ProfileUpdateRequest, caller: CallerDep, db: SessionDep
) -> MeResponse:
    """Update name, bio or images of the authenticated user."""
    return user_service.update_profile(db, caller, payload)


@router.get("/by-username/{username}", response_model=ProfileResponse)
async def get_by_username(username: str, db: SessionDep) -> ProfileResponse:
    return user_service.get_by_username(db, username)


@router.get("/{user_id}/reputation")
async def get_reputation(user_id: str, db: SessionDep) -> dict[str, float]:
    """Reputation score of a user; 0 for unknown users."""
    return {"reputation_score": user_service.reputation_score(db, user_id)}


@router.post("/{user_id}/follow", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def follow_user(user_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    user_service.follow(db, caller, user_id)
    return SuccessResponse()


@router.delete("/{user_id}/follow", response_model=SuccessResponse)
async def unfollow_user(user_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    user_service.unfollow(db, caller, user_id)
    return SuccessResponse()


@router.get("/{user_id}/followers", response_model=Page[UserSummary])
async def list_followers(
    user_id: str,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of users to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[UserSummary]:
    page = user_service.list_followers(db, user_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.get("/{user_id}/following", response_model=Page[UserSummary])
async def list_following(
    user_id: str,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of users to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[UserSummary]:
    page = user_service.list_following(db, user_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.get("/{user_id}/posts", response_model=Page[PostResponse])
async def list_user_posts(
    user_id: str,
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of posts to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[PostResponse]:
    """Posts of a user, filtered by what the caller may see."""
    page = post_service.get_user_posts(db, caller, user_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.get("/{user_id}/stories", response_model=list[StoryResponse])
async def list_user_stories(
    user_id: str, caller: CallerDep, db: SessionDep
) -> list[StoryResponse]:
    """Active stories of a user; followers and the owner only."""
    return story_service.get_user_stories(db, caller, user_id)


@router.get("/{user_id}/reels", response_model=Page[ReelResponse])
async def list_user_reels(
    user_id: str,
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(20, ge=1, le=50, description="Maximum number of reels to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[ReelResponse]:
    page = reel_service.get_user_reels(db, caller, user_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)

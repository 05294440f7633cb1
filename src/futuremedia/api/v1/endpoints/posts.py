"""Post-related endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import Page, ReactionCreate, SuccessResponse
from futuremedia.schemas.post import (
    CommentCreate,
    CommentResponse,
    ConvertPostTypeRequest,
    PostCreate,
    PostDetailResponse,
    PostResponse,
    ReactionResult,
)
from futuremedia.services import posts as post_service

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=Page[PostResponse])
async def list_posts(
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=100, description="Maximum number of posts to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[PostResponse]:
    """List the newest posts visible to the caller."""
    page = post_service.get_feed(db, caller, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, caller: CallerDep, db: SessionDep) -> PostResponse:
    """Create a new post owned by the caller."""
    return post_service.create_post(db, caller, payload)


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post(post_id: str, caller: CallerDep, db: SessionDep) -> PostDetailResponse:
    """Get a specific post with its comments."""
    return post_service.get_post(db, caller, post_id)


@router.delete("/{post_id}", response_model=SuccessResponse)
async def delete_post(post_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    post_service.delete_post(db, caller, post_id)
    return SuccessResponse()


@router.post("/{post_id}/like", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def like_post(post_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    post_service.like_post(db, caller, post_id)
    return SuccessResponse()


@router.delete("/{post_id}/like", response_model=SuccessResponse)
async def unlike_post(post_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    post_service.unlike_post(db, caller, post_id)
    return SuccessResponse()


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_post(
    post_id: str, payload: CommentCreate, caller: CallerDep, db: SessionDep
) -> CommentResponse:
    return post_service.comment_on_post(db, caller, post_id, payload)


@router.post("/{post_id}/reactions", response_model=ReactionResult)
async def react_to_post(
    post_id: str, payload: ReactionCreate, caller: CallerDep, db: SessionDep
) -> ReactionResult:
    """Add, change or remove the caller's reaction."""
    action = post_service.react_to_post(db, caller, post_id, payload.type)
    return ReactionResult(action=action)


@router.put("/{post_id}/type", response_model=PostResponse)
async def convert_post_type(
    post_id: str, payload: ConvertPostTypeRequest, caller: CallerDep, db: SessionDep
) -> PostResponse:
    """Switch a post to a different media type."""
    return post_service.convert_post_type(db, caller, post_id, payload)

"""Reel endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import Page, ReactionCreate, SuccessResponse
from futuremedia.schemas.post import ReactionResult
from futuremedia.schemas.reel import (
    ReelCreate,
    ReelDetailResponse,
    ReelResponse,
    TrendingReelsResponse,
    TrendingTimeframe,
)
from futuremedia.services import reels as reel_service

router = APIRouter(prefix="/reels", tags=["reels"])


@router.get("/", response_model=Page[ReelResponse])
async def reel_feed(
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=20, description="Maximum number of reels to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[ReelResponse]:
    page = reel_service.get_feed(db, caller, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.post("/", response_model=ReelResponse, status_code=status.HTTP_201_CREATED)
async def create_reel(payload: ReelCreate, caller: CallerDep, db: SessionDep) -> ReelResponse:
    return reel_service.create_reel(db, caller, payload)


@router.get("/trending", response_model=TrendingReelsResponse)
async def trending_reels(
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(10, ge=1, le=20),
    timeframe: TrendingTimeframe = Query("week"),
) -> TrendingReelsResponse:
    """Reels ranked by reactions received in the window."""
    reels = reel_service.get_trending(db, caller, limit=limit, timeframe=timeframe)
    return TrendingReelsResponse(reels=reels)


@router.get("/{reel_id}", response_model=ReelDetailResponse)
async def get_reel(reel_id: str, caller: CallerDep, db: SessionDep) -> ReelDetailResponse:
    return reel_service.get_reel(db, caller, reel_id)


@router.post("/{reel_id}/reactions", response_model=ReactionResult)
async def react_to_reel(
    reel_id: str, payload: ReactionCreate, caller: CallerDep, db: SessionDep
) -> ReactionResult:
    action = reel_service.react_to_reel(db, caller, reel_id, payload.type)
    return ReactionResult(action=action)


@router.delete("/{reel_id}", response_model=SuccessResponse)
async def delete_reel(reel_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    reel_service.delete_reel(db, caller, reel_id)
    return SuccessResponse()

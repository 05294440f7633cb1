"""Story endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import ReactionCreate, SuccessResponse
from futuremedia.schemas.story import StoryCreate, StoryGroup, StoryResponse, StoryViewer
from futuremedia.services import stories as story_service

router = APIRouter(prefix="/stories", tags=["stories"])


@router.post("/", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
async def create_story(payload: StoryCreate, caller: CallerDep, db: SessionDep) -> StoryResponse:
    return story_service.create_story(db, caller, payload)


@router.get("/following", response_model=list[StoryGroup])
async def following_stories(caller: CallerDep, db: SessionDep) -> list[StoryGroup]:
    """Active stories of the caller and followed users, grouped by author."""
    return story_service.get_following_stories(db, caller)


@router.post("/{story_id}/view", response_model=SuccessResponse)
async def view_story(story_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    story_service.view_story(db, caller, story_id)
    return SuccessResponse()


@router.delete("/{story_id}", response_model=SuccessResponse)
async def delete_story(story_id: str, caller: CallerDep, db: SessionDep) -> SuccessResponse:
    story_service.delete_story(db, caller, story_id)
    return SuccessResponse()


@router.post("/{story_id}/reactions", response_model=SuccessResponse)
async def react_to_story(
    story_id: str, payload: ReactionCreate, caller: CallerDep, db: SessionDep
) -> SuccessResponse:
    story_service.react_to_story(db, caller, story_id, payload.type)
    return SuccessResponse()


@router.get("/{story_id}/viewers", response_model=list[StoryViewer])
async def story_viewers(story_id: str, caller: CallerDep, db: SessionDep) -> list[StoryViewer]:
    """Viewers of one of the caller's stories."""
    return story_service.get_viewers(db, caller, story_id)

"""Direct and group message endpoints for the FutureMedia API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from futuremedia.api.v1.dependencies import CallerDep, SessionDep
from futuremedia.schemas.common import Page, ReactionCreate, SuccessResponse
from futuremedia.schemas.message import (
    ConversationSummary,
    GroupCreate,
    GroupMessageCreate,
    GroupResponse,
    MessageCreate,
    MessageResponse,
)
from futuremedia.services import messages as message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: MessageCreate, caller: CallerDep, db: SessionDep
) -> MessageResponse:
    """Send a direct message to another user."""
    return message_service.send_message(db, caller, payload)


@router.get("/conversations", response_model=list[ConversationSummary])
async def recent_conversations(caller: CallerDep, db: SessionDep) -> list[ConversationSummary]:
    return message_service.get_recent_conversations(db, caller)


@router.get("/conversations/{user_id}", response_model=Page[MessageResponse])
async def get_conversation(
    user_id: str,
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100, description="Maximum number of messages to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[MessageResponse]:
    """Messages exchanged with a user; marks theirs as read."""
    page = message_service.get_conversation(db, caller, user_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.post("/groups", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(payload: GroupCreate, caller: CallerDep, db: SessionDep) -> GroupResponse:
    group = message_service.create_group(db, caller, payload)
    return GroupResponse.model_validate(group)


@router.get("/groups", response_model=list[GroupResponse])
async def list_groups(caller: CallerDep, db: SessionDep) -> list[GroupResponse]:
    return [GroupResponse.model_validate(g) for g in message_service.get_groups(db, caller)]


@router.post(
    "/groups/{group_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_group_message(
    group_id: str, payload: GroupMessageCreate, caller: CallerDep, db: SessionDep
) -> MessageResponse:
    return message_service.send_group_message(db, caller, group_id, payload)


@router.get("/groups/{group_id}", response_model=Page[MessageResponse])
async def get_group_messages(
    group_id: str,
    caller: CallerDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100, description="Maximum number of messages to return"),
    cursor: str | None = Query(None, description="Cursor from a previous page"),
) -> Page[MessageResponse]:
    page = message_service.get_group_messages(db, caller, group_id, limit=limit, cursor=cursor)
    return Page(items=page.items, next_cursor=page.next_cursor)


@router.put("/{message_id}/reaction", response_model=SuccessResponse)
async def add_message_reaction(
    message_id: str, payload: ReactionCreate, caller: CallerDep, db: SessionDep
) -> SuccessResponse:
    message_service.add_message_reaction(db, caller, message_id, payload.type)
    return SuccessResponse()


@router.delete("/{message_id}/reaction", response_model=SuccessResponse)
async def remove_message_reaction(
    message_id: str, caller: CallerDep, db: SessionDep
) -> SuccessResponse:
    message_service.remove_message_reaction(db, caller, message_id)
    return SuccessResponse()

"""Direct messages, group chats and message reactions."""
from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futuremedia.core.caller import Caller
from futuremedia.core.errors import BadRequestError, ForbiddenError, NotFoundError
from futuremedia.db.session import unit_of_work
from futuremedia.db.time import utcnow
from futuremedia.models import Group, GroupMember, Message, Reaction, TargetKind, TargetRef, User
from futuremedia.schemas.common import ReactionResponse, UserSummary
from futuremedia.schemas.message import (
    ConversationSummary,
    GroupCreate,
    GroupMessageCreate,
    MessageCreate,
    MessageResponse,
)
from futuremedia.services.pagination import CursorPage, paginate

logger = logging.getLogger(__name__)

RECENT_CONVERSATIONS = 20

__all__ = [
    "send_message",
    "get_conversation",
    "get_recent_conversations",
    "create_group",
    "get_groups",
    "send_group_message",
    "get_group_messages",
    "add_message_reaction",
    "remove_message_reaction",
]


def _to_responses(db: Session, messages: Sequence[Message]) -> list[MessageResponse]:
    ids = [message.id for message in messages]
    reactions: dict[str, list[ReactionResponse]] = defaultdict(list)
    if ids:
        rows = db.scalars(
            select(Reaction)
            .where(Reaction.message_id.in_(ids))
            .order_by(Reaction.created_at, Reaction.id)
        ).all()
        for reaction in rows:
            reactions[reaction.message_id].append(ReactionResponse.model_validate(reaction))

    return [
        MessageResponse(
            id=message.id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            group_id=message.group_id,
            content=message.content,
            content_type=message.content_type,
            read_at=message.read_at,
            created_at=message.created_at,
            sender=UserSummary.model_validate(message.sender),
            reactions=reactions.get(message.id, []),
        )
        for message in messages
    ]


def _between(user_a: str, user_b: str):
    return and_(
        Message.group_id.is_(None),
        or_(
            and_(Message.sender_id == user_a, Message.receiver_id == user_b),
            and_(Message.sender_id == user_b, Message.receiver_id == user_a),
        ),
    )


def _require_member(db: Session, user_id: str, group_id: str) -> None:
    member = db.scalars(
        select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
    ).first()
    if member is None:
        raise ForbiddenError("You are not a member of this group")


def send_message(db: Session, caller: Caller, data: MessageCreate) -> MessageResponse:
    """Send a direct message.

    Raises:
        BadRequestError: The receiver is the caller.
        NotFoundError: Unknown receiver.
    """
    user_id = caller.require()
    if data.receiver_id == user_id:
        raise BadRequestError("Cannot send message to yourself")
    if db.get(User, data.receiver_id) is None:
        raise NotFoundError("Receiver not found")

    message = Message(
        sender_id=user_id,
        receiver_id=data.receiver_id,
        content=data.content,
        content_type=data.content_type,
    )
    with unit_of_work(db):
        db.add(message)
    db.refresh(message)
    logger.debug("Message %s sent %s -> %s", message.id, user_id, data.receiver_id)
    return _to_responses(db, [message])[0]


def get_conversation(
    db: Session, caller: Caller, other_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[MessageResponse]:
    """One page of the direct conversation with `other_id`.

    Pages are walked newest first but each page is returned oldest first.
    Everything the other user sent to the caller is marked read.
    """
    user_id = caller.require()
    page = paginate(
        db,
        select(Message).where(_between(user_id, other_id)),
        Message,
        limit=limit,
        cursor=cursor,
    )
    items = _to_responses(db, list(reversed(page.items)))

    with unit_of_work(db):
        db.execute(
            update(Message)
            .where(
                Message.sender_id == other_id,
                Message.receiver_id == user_id,
                Message.group_id.is_(None),
                Message.read_at.is_(None),
            )
            .values(read_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
    return CursorPage(items=items, next_cursor=page.next_cursor)


def get_recent_conversations(db: Session, caller: Caller) -> list[ConversationSummary]:
    """Latest direct conversations of the caller, most recently active first."""
    user_id = caller.require()
    exchanged = (
        select(
            case(
                (Message.sender_id == user_id, Message.receiver_id),
                else_=Message.sender_id,
            ).label("partner_id"),
            Message.created_at,
        )
        .where(
            Message.group_id.is_(None),
            or_(Message.sender_id == user_id, Message.receiver_id == user_id),
        )
        .subquery()
    )
    last_at = func.max(exchanged.c.created_at)
    partners = db.execute(
        select(exchanged.c.partner_id, last_at.label("last_at"))
        .group_by(exchanged.c.partner_id)
        .order_by(last_at.desc())
        .limit(RECENT_CONVERSATIONS)
    ).all()

    summaries: list[ConversationSummary] = []
    for row in partners:
        other = db.get(User, row.partner_id)
        last = db.scalars(
            select(Message)
            .where(_between(user_id, row.partner_id))
            .order_by(Message.created_at.desc(), Message.id.desc())
            .limit(1)
        ).first()
        unread = db.scalar(
            select(func.count())
            .select_from(Message)
            .where(
                Message.sender_id == row.partner_id,
                Message.receiver_id == user_id,
                Message.group_id.is_(None),
                Message.read_at.is_(None),
            )
        )
        summaries.append(
            ConversationSummary(
                user=UserSummary.model_validate(other) if other is not None else None,
                last_message=_to_responses(db, [last])[0] if last is not None else None,
                unread_count=unread or 0,
            )
        )
    return summaries


def create_group(db: Session, caller: Caller, data: GroupCreate) -> Group:
    """Create a group chat with the caller as admin."""
    user_id = caller.require()
    member_ids = [m for m in dict.fromkeys(data.member_ids) if m != user_id]
    if member_ids:
        known = set(db.scalars(select(User.id).where(User.id.in_(member_ids))).all())
        missing = [m for m in member_ids if m not in known]
        if missing:
            raise NotFoundError(f"Unknown member(s): {', '.join(missing)}")

    group = Group(name=data.name, description=data.description, image_url=data.image_url)
    group.members = [GroupMember(user_id=user_id, role="admin")] + [
        GroupMember(user_id=member_id, role="member") for member_id in member_ids
    ]
    with unit_of_work(db):
        db.add(group)
    db.refresh(group)
    logger.info("User %s created group %s with %d members", user_id, group.id, len(group.members))
    return group


def get_groups(db: Session, caller: Caller) -> list[Group]:
    """Groups the caller belongs to, most recently updated first."""
    user_id = caller.require()
    return list(
        db.scalars(
            select(Group)
            .join(GroupMember, GroupMember.group_id == Group.id)
            .where(GroupMember.user_id == user_id)
            .order_by(Group.updated_at.desc(), Group.id.desc())
        ).all()
    )


def send_group_message(
    db: Session, caller: Caller, group_id: str, data: GroupMessageCreate
) -> MessageResponse:
    """Post a message to a group the caller belongs to."""
    user_id = caller.require()
    group = db.get(Group, group_id)
    if group is None:
        raise NotFoundError("Group not found")
    _require_member(db, user_id, group.id)

    message = Message(
        sender_id=user_id,
        group_id=group.id,
        content=data.content,
        content_type=data.content_type,
    )
    with unit_of_work(db):
        db.add(message)
        group.updated_at = utcnow()
    db.refresh(message)
    return _to_responses(db, [message])[0]


def get_group_messages(
    db: Session, caller: Caller, group_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[MessageResponse]:
    """One page of a group's messages, returned oldest first."""
    user_id = caller.require()
    if db.get(Group, group_id) is None:
        raise NotFoundError("Group not found")
    _require_member(db, user_id, group_id)

    page = paginate(
        db,
        select(Message).where(Message.group_id == group_id),
        Message,
        limit=limit,
        cursor=cursor,
    )
    return CursorPage(
        items=_to_responses(db, list(reversed(page.items))),
        next_cursor=page.next_cursor,
    )


def _get_visible_message(db: Session, user_id: str, message_id: str) -> Message:
    message = db.get(Message, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.group_id is not None:
        _require_member(db, user_id, message.group_id)
    elif user_id not in (message.sender_id, message.receiver_id):
        raise ForbiddenError("You are not part of this conversation")
    return message


def add_message_reaction(db: Session, caller: Caller, message_id: str, reaction_type: str) -> None:
    """Set the caller's reaction on a message. Never notifies."""
    user_id = caller.require()
    message = _get_visible_message(db, user_id, message_id)
    existing = db.scalars(
        select(Reaction).where(Reaction.user_id == user_id, Reaction.message_id == message.id)
    ).first()
    try:
        with unit_of_work(db):
            if existing is not None:
                existing.type = reaction_type
            else:
                db.add(
                    Reaction(
                        user_id=user_id,
                        type=reaction_type,
                        target=TargetRef(TargetKind.MESSAGE, message.id),
                    )
                )
    except IntegrityError as exc:
        raise BadRequestError("You have already reacted to this message") from exc


def remove_message_reaction(db: Session, caller: Caller, message_id: str) -> None:
    """Drop the caller's reaction on a message if there is one."""
    user_id = caller.require()
    with unit_of_work(db):
        existing = db.scalars(
            select(Reaction).where(Reaction.user_id == user_id, Reaction.message_id == message_id)
        ).first()
        if existing is not None:
            db.delete(existing)

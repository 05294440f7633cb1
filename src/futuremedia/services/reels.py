"""Short-form video reels and reel reactions."""
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futuremedia.core.caller import Caller
from futuremedia.core.errors import BadRequestError, ForbiddenError, NotFoundError
from futuremedia.db.session import unit_of_work
from futuremedia.db.time import window_start
from futuremedia.models import NotificationType, Reaction, Reel, TargetKind, TargetRef
from futuremedia.schemas.common import ReactionResponse, UserSummary
from futuremedia.schemas.reel import (
    ReelCreate,
    ReelDetailResponse,
    ReelResponse,
    TrendingTimeframe,
)
from futuremedia.services.notifications import fan_out
from futuremedia.services.pagination import CursorPage, paginate

logger = logging.getLogger(__name__)

TRENDING_WINDOWS: dict[str, timedelta] = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}
DETAIL_REACTIONS = 50

__all__ = [
    "create_reel",
    "get_feed",
    "get_user_reels",
    "get_reel",
    "react_to_reel",
    "delete_reel",
    "get_trending",
]


def _get_reel(db: Session, reel_id: str) -> Reel:
    reel = db.get(Reel, reel_id)
    if reel is None:
        raise NotFoundError("Reel not found")
    return reel


def _reaction_summary(
    db: Session, reels: Sequence[Reel], caller: Caller
) -> tuple[dict[str, int], dict[str, str]]:
    ids = [reel.id for reel in reels]
    if not ids:
        return {}, {}
    counts = dict(
        db.execute(
            select(Reaction.reel_id, func.count())
            .where(Reaction.reel_id.in_(ids))
            .group_by(Reaction.reel_id)
        ).all()
    )
    mine: dict[str, str] = {}
    if caller.is_authenticated:
        mine = dict(
            db.execute(
                select(Reaction.reel_id, Reaction.type).where(
                    Reaction.reel_id.in_(ids), Reaction.user_id == caller.user_id
                )
            ).all()
        )
    return counts, mine


def _to_response(reel: Reel, counts: dict[str, int], mine: dict[str, str]) -> ReelResponse:
    return ReelResponse(
        id=reel.id,
        video_url=reel.video_url,
        caption=reel.caption,
        sound_name=reel.sound_name,
        created_at=reel.created_at,
        user=UserSummary.model_validate(reel.user),
        reaction_count=counts.get(reel.id, 0),
        user_reaction=mine.get(reel.id),
    )


def _page_response(db: Session, page: CursorPage[Reel], caller: Caller) -> CursorPage[ReelResponse]:
    counts, mine = _reaction_summary(db, page.items, caller)
    return CursorPage(
        items=[_to_response(reel, counts, mine) for reel in page.items],
        next_cursor=page.next_cursor,
    )


def create_reel(db: Session, caller: Caller, data: ReelCreate) -> ReelResponse:
    """Publish a reel."""
    user_id = caller.require()
    reel = Reel(
        user_id=user_id,
        video_url=data.video_url,
        caption=data.caption,
        sound_name=data.sound_name,
    )
    with unit_of_work(db):
        db.add(reel)
    db.refresh(reel)
    logger.info("User %s created reel %s", user_id, reel.id)
    return _to_response(reel, {}, {})


def get_feed(
    db: Session, caller: Caller, *, limit: int, cursor: str | None = None
) -> CursorPage[ReelResponse]:
    page = paginate(db, select(Reel), Reel, limit=limit, cursor=cursor)
    return _page_response(db, page, caller)


def get_user_reels(
    db: Session, caller: Caller, user_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[ReelResponse]:
    page = paginate(db, select(Reel).where(Reel.user_id == user_id), Reel, limit=limit, cursor=cursor)
    return _page_response(db, page, caller)


def get_reel(db: Session, caller: Caller, reel_id: str) -> ReelDetailResponse:
    """A reel with its latest reactions and the caller's own reaction."""
    reel = _get_reel(db, reel_id)
    counts, mine = _reaction_summary(db, [reel], caller)
    reactions = db.scalars(
        select(Reaction)
        .where(Reaction.reel_id == reel.id)
        .order_by(Reaction.created_at.desc(), Reaction.id.desc())
        .limit(DETAIL_REACTIONS)
    ).all()
    base = _to_response(reel, counts, mine)
    return ReelDetailResponse(
        **base.model_dump(),
        reactions=[ReactionResponse.model_validate(reaction) for reaction in reactions],
    )


def react_to_reel(db: Session, caller: Caller, reel_id: str, reaction_type: str) -> str:
    """Toggle the caller's reaction on a reel; see `posts.react_to_post`."""
    user_id = caller.require()
    reel = _get_reel(db, reel_id)
    existing = db.scalars(
        select(Reaction).where(Reaction.user_id == user_id, Reaction.reel_id == reel.id)
    ).first()

    try:
        with unit_of_work(db):
            if existing is not None and existing.type == reaction_type:
                db.delete(existing)
                return "removed"
            if existing is not None:
                existing.type = reaction_type
                return "updated"
            target = TargetRef(TargetKind.REEL, reel.id)
            db.add(Reaction(user_id=user_id, type=reaction_type, target=target))
            db.flush()
            fan_out(
                db,
                actor_id=user_id,
                owner_id=reel.user_id,
                type_=NotificationType.REACTION,
                content=f"reacted with {reaction_type} to your reel",
                target=target,
            )
    except IntegrityError as exc:
        raise BadRequestError("You have already reacted to this reel") from exc
    return "added"


def delete_reel(db: Session, caller: Caller, reel_id: str) -> None:
    """Delete a reel owned by the caller."""
    user_id = caller.require()
    reel = _get_reel(db, reel_id)
    if reel.user_id != user_id:
        raise ForbiddenError("You are not authorized to delete this reel")
    with unit_of_work(db):
        db.delete(reel)


def get_trending(
    db: Session, caller: Caller, *, limit: int, timeframe: TrendingTimeframe = "week"
) -> list[ReelResponse]:
    """Reels with the most reactions created inside the time window."""
    since = window_start(TRENDING_WINDOWS[timeframe])
    reaction_count = func.count(Reaction.id)
    ranked = db.execute(
        select(Reaction.reel_id, reaction_count)
        .where(Reaction.reel_id.is_not(None), Reaction.created_at >= since)
        .group_by(Reaction.reel_id)
        .order_by(reaction_count.desc(), Reaction.reel_id)
        .limit(limit)
    ).all()
    if not ranked:
        return []

    ids = [reel_id for reel_id, _ in ranked]
    by_id = {reel.id: reel for reel in db.scalars(select(Reel).where(Reel.id.in_(ids))).all()}
    reels = [by_id[reel_id] for reel_id in ids if reel_id in by_id]
    counts, mine = _reaction_summary(db, reels, caller)
    return [_to_response(reel, counts, mine) for reel in reels]

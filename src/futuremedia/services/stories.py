"""Ephemeral stories, their views and reactions."""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futuremedia.core.caller import Caller
from futuremedia.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from futuremedia.core.settings import settings
from futuremedia.db.session import unit_of_work
from futuremedia.db.time import utcnow
from futuremedia.models import (
    Follow,
    NotificationType,
    Reaction,
    Story,
    StoryView,
    TargetKind,
    TargetRef,
)
from futuremedia.schemas.common import UserSummary
from futuremedia.schemas.story import StoryCreate, StoryGroup, StoryResponse, StoryViewer
from futuremedia.services.notifications import fan_out

logger = logging.getLogger(__name__)

__all__ = [
    "create_story",
    "get_following_stories",
    "get_user_stories",
    "view_story",
    "delete_story",
    "react_to_story",
    "get_viewers",
]


def _get_story(db: Session, story_id: str) -> Story:
    story = db.get(Story, story_id)
    if story is None:
        raise NotFoundError("Story not found")
    return story


def _viewed_ids(db: Session, viewer_id: str | None, story_ids: list[str]) -> set[str]:
    if viewer_id is None or not story_ids:
        return set()
    return set(
        db.scalars(
            select(StoryView.story_id).where(
                StoryView.viewer_id == viewer_id, StoryView.story_id.in_(story_ids)
            )
        ).all()
    )


def _to_response(story: Story, viewed: set[str]) -> StoryResponse:
    return StoryResponse(
        id=story.id,
        media_url=story.media_url,
        media_type=story.media_type,
        duration=story.duration,
        created_at=story.created_at,
        expires_at=story.expires_at,
        user=UserSummary.model_validate(story.user),
        is_viewed=story.id in viewed,
    )


def create_story(db: Session, caller: Caller, data: StoryCreate) -> StoryResponse:
    """Publish a story that expires after the configured lifetime."""
    user_id = caller.require()
    now = utcnow()
    story = Story(
        user_id=user_id,
        media_url=data.media_url,
        media_type=data.media_type,
        duration=data.duration,
        created_at=now,
        expires_at=now + timedelta(hours=settings.story_ttl_hours),
    )
    with unit_of_work(db):
        db.add(story)
    db.refresh(story)
    logger.info("User %s created story %s", user_id, story.id)
    return _to_response(story, set())


def get_following_stories(db: Session, caller: Caller) -> list[StoryGroup]:
    """Active stories of the caller and everyone they follow, grouped by author.

    Authors with stories the caller has not seen come first; ties are broken
    by the most recent story.
    """
    user_id = caller.require()
    author_ids = select(Follow.following_id).where(Follow.follower_id == user_id)
    stories = db.scalars(
        select(Story)
        .where(
            (Story.user_id == user_id) | Story.user_id.in_(author_ids),
            Story.expires_at > utcnow(),
        )
        .order_by(Story.created_at.desc(), Story.id.desc())
    ).all()
    viewed = _viewed_ids(db, user_id, [story.id for story in stories])

    grouped: dict[str, StoryGroup] = {}
    for story in stories:
        item = _to_response(story, viewed)
        group = grouped.get(story.user_id)
        if group is None:
            group = grouped[story.user_id] = StoryGroup(
                user=item.user, stories=[], has_unseen_stories=False
            )
        group.stories.append(item)
        if not item.is_viewed:
            group.has_unseen_stories = True

    groups = list(grouped.values())
    # Stable sorts: recency first, then unseen ahead of seen.
    groups.sort(key=lambda g: g.stories[0].created_at, reverse=True)
    groups.sort(key=lambda g: not g.has_unseen_stories)
    return groups


def get_user_stories(db: Session, caller: Caller, user_id: str) -> list[StoryResponse]:
    """Active stories of one user.

    Raises:
        UnauthorizedError: Anonymous caller asking for someone else's stories.
        ForbiddenError: The caller does not follow the author.
    """
    if caller.user_id != user_id:
        if not caller.is_authenticated:
            raise UnauthorizedError("You must be logged in to view stories")
        follows = db.scalars(
            select(Follow).where(
                Follow.follower_id == caller.user_id, Follow.following_id == user_id
            )
        ).first()
        if follows is None:
            raise ForbiddenError("You must follow this user to view their stories")

    stories = db.scalars(
        select(Story)
        .where(Story.user_id == user_id, Story.expires_at > utcnow())
        .order_by(Story.created_at.desc(), Story.id.desc())
    ).all()
    viewed = _viewed_ids(db, caller.user_id, [story.id for story in stories])
    return [_to_response(story, viewed) for story in stories]


def view_story(db: Session, caller: Caller, story_id: str) -> None:
    """Record that the caller opened a story. Repeated views are no-ops."""
    user_id = caller.require()
    story = _get_story(db, story_id)
    existing = db.scalars(
        select(StoryView).where(StoryView.story_id == story.id, StoryView.viewer_id == user_id)
    ).first()
    if existing is not None:
        return
    try:
        with unit_of_work(db):
            db.add(StoryView(story_id=story.id, viewer_id=user_id))
    except IntegrityError:
        # A concurrent request recorded the same view.
        logger.debug("Story view %s by %s already recorded", story_id, user_id)


def delete_story(db: Session, caller: Caller, story_id: str) -> None:
    """Delete a story owned by the caller."""
    user_id = caller.require()
    story = _get_story(db, story_id)
    if story.user_id != user_id:
        raise ForbiddenError("You are not authorized to delete this story")
    with unit_of_work(db):
        db.delete(story)


def react_to_story(db: Session, caller: Caller, story_id: str, reaction_type: str) -> None:
    """Set the caller's reaction on a story; the first reaction notifies the author."""
    user_id = caller.require()
    story = _get_story(db, story_id)
    existing = db.scalars(
        select(Reaction).where(Reaction.user_id == user_id, Reaction.story_id == story.id)
    ).first()

    try:
        with unit_of_work(db):
            if existing is not None:
                existing.type = reaction_type
                return
            target = TargetRef(TargetKind.STORY, story.id)
            db.add(Reaction(user_id=user_id, type=reaction_type, target=target))
            db.flush()
            fan_out(
                db,
                actor_id=user_id,
                owner_id=story.user_id,
                type_=NotificationType.REACTION,
                content=f"reacted with {reaction_type} to your story",
                target=target,
            )
    except IntegrityError as exc:
        raise BadRequestError("You have already reacted to this story") from exc


def get_viewers(db: Session, caller: Caller, story_id: str) -> list[StoryViewer]:
    """Who viewed a story, most recent first, with their reaction if any."""
    user_id = caller.require()
    story = _get_story(db, story_id)
    if story.user_id != user_id:
        raise ForbiddenError("You are not authorized to view this information")

    views = db.scalars(
        select(StoryView)
        .where(StoryView.story_id == story.id)
        .order_by(StoryView.viewed_at.desc())
    ).all()
    reactions = dict(
        db.execute(
            select(Reaction.user_id, Reaction.type).where(Reaction.story_id == story.id)
        ).all()
    )
    return [
        StoryViewer(
            viewer=UserSummary.model_validate(view.viewer),
            viewed_at=view.viewed_at,
            reaction=reactions.get(view.viewer_id),
        )
        for view in views
    ]

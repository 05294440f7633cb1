"""Posts, comments, likes and post reactions."""
from __future__ import annotations

import base64
import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futuremedia.core.caller import Caller
from futuremedia.core.errors import BadRequestError, ForbiddenError, NotFoundError
from futuremedia.db.session import unit_of_work
from futuremedia.db.time import utcnow
from futuremedia.models import (
    Comment,
    Like,
    NotificationType,
    Post,
    Reaction,
    Tag,
    TargetKind,
    TargetRef,
)
from futuremedia.schemas.common import UserSummary
from futuremedia.schemas.post import (
    CommentCreate,
    CommentResponse,
    ConvertPostTypeRequest,
    PostCreate,
    PostDetailResponse,
    PostResponse,
)
from futuremedia.services.notifications import fan_out
from futuremedia.services.pagination import CursorPage, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "to_post_response",
    "get_feed",
    "create_post",
    "get_post",
    "like_post",
    "unlike_post",
    "comment_on_post",
    "delete_post",
    "get_user_posts",
    "react_to_post",
    "convert_post_type",
]


def _visible_to(caller: Caller) -> ColumnElement[bool]:
    # Anonymous readers see public posts only.
    if not caller.is_authenticated:
        return Post.visibility == "public"
    return or_(
        Post.visibility.in_(("public", "friends")),
        and_(Post.visibility == "private", Post.user_id == caller.user_id),
    )


def _get_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _integrity_hash(content_url: str | None) -> str | None:
    if not content_url:
        return None
    return base64.b64encode(content_url.encode("utf-8")).decode("ascii")


def _resolve_tags(db: Session, names: Sequence[str]) -> list[Tag]:
    tags: list[Tag] = []
    for name in dict.fromkeys(n.strip() for n in names if n.strip()):
        tag = db.scalars(select(Tag).where(Tag.name == name)).first()
        if tag is None:
            tag = Tag(name=name)
            db.add(tag)
        tags.append(tag)
    return tags


def _stats(
    db: Session, posts: Sequence[Post], caller: Caller
) -> tuple[dict[str, int], dict[str, int], set[str]]:
    ids = [post.id for post in posts]
    if not ids:
        return {}, {}, set()
    likes = dict(
        db.execute(
            select(Like.post_id, func.count()).where(Like.post_id.in_(ids)).group_by(Like.post_id)
        ).all()
    )
    comments = dict(
        db.execute(
            select(Comment.post_id, func.count())
            .where(Comment.post_id.in_(ids))
            .group_by(Comment.post_id)
        ).all()
    )
    liked: set[str] = set()
    if caller.is_authenticated:
        liked = set(
            db.scalars(
                select(Like.post_id).where(Like.post_id.in_(ids), Like.user_id == caller.user_id)
            ).all()
        )
    return likes, comments, liked


def to_post_response(
    post: Post,
    *,
    like_count: int = 0,
    comment_count: int = 0,
    is_liked: bool = False,
) -> PostResponse:
    """Build the API representation of a post."""
    return PostResponse(
        id=post.id,
        caption=post.caption,
        content_url=post.content_url,
        content_type=post.content_type,
        ipfs_hash=post.ipfs_hash,
        integrity_hash=post.integrity_hash,
        visibility=post.visibility,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user=UserSummary.model_validate(post.user),
        tags=[tag.name for tag in post.tags],
        like_count=like_count,
        comment_count=comment_count,
        is_liked=is_liked,
    )


def _page_response(db: Session, page: CursorPage[Post], caller: Caller) -> CursorPage[PostResponse]:
    likes, comments, liked = _stats(db, page.items, caller)
    return CursorPage(
        items=[
            to_post_response(
                post,
                like_count=likes.get(post.id, 0),
                comment_count=comments.get(post.id, 0),
                is_liked=post.id in liked,
            )
            for post in page.items
        ],
        next_cursor=page.next_cursor,
    )


def get_feed(
    db: Session, caller: Caller, *, limit: int, cursor: str | None = None
) -> CursorPage[PostResponse]:
    """Newest posts across all users that the caller may see."""
    stmt = select(Post).where(_visible_to(caller))
    page = paginate(db, stmt, Post, limit=limit, cursor=cursor)
    return _page_response(db, page, caller)


def get_user_posts(
    db: Session, caller: Caller, user_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[PostResponse]:
    """Posts of one author filtered by visibility for the caller."""
    stmt = select(Post).where(Post.user_id == user_id, _visible_to(caller))
    page = paginate(db, stmt, Post, limit=limit, cursor=cursor)
    return _page_response(db, page, caller)


def create_post(db: Session, caller: Caller, data: PostCreate) -> PostResponse:
    """Publish a post, creating any tags that do not exist yet."""
    user_id = caller.require()
    post = Post(
        user_id=user_id,
        caption=data.caption,
        content_url=data.content_url,
        content_type=data.content_type,
        ipfs_hash=data.ipfs_hash,
        integrity_hash=_integrity_hash(data.content_url),
        visibility=data.visibility,
    )
    with unit_of_work(db):
        post.tags = _resolve_tags(db, data.tags or [])
        db.add(post)
    db.refresh(post)
    logger.info("User %s created post %s", user_id, post.id)
    return to_post_response(post)


def get_post(db: Session, caller: Caller, post_id: str) -> PostDetailResponse:
    """Return a post with its comments newest first and interaction stats."""
    post = _get_post(db, post_id)
    likes, comments, liked = _stats(db, [post], caller)
    rows = db.scalars(
        select(Comment)
        .where(Comment.post_id == post.id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    ).all()
    base = to_post_response(
        post,
        like_count=likes.get(post.id, 0),
        comment_count=comments.get(post.id, 0),
        is_liked=post.id in liked,
    )
    return PostDetailResponse(
        **base.model_dump(),
        comments=[CommentResponse.model_validate(comment) for comment in rows],
    )


def like_post(db: Session, caller: Caller, post_id: str) -> Like:
    """Like a post and notify its author.

    Raises:
        NotFoundError: Unknown post.
        BadRequestError: The caller already likes the post.
    """
    user_id = caller.require()
    post = _get_post(db, post_id)
    existing = db.scalars(
        select(Like).where(Like.user_id == user_id, Like.post_id == post.id)
    ).first()
    if existing is not None:
        raise BadRequestError("Post already liked")

    like = Like(user_id=user_id, post_id=post.id)
    try:
        with unit_of_work(db):
            db.add(like)
            db.flush()
            fan_out(
                db,
                actor_id=user_id,
                owner_id=post.user_id,
                type_=NotificationType.LIKE,
                content="liked your post",
                target=TargetRef(TargetKind.POST, post.id),
            )
    except IntegrityError as exc:
        raise BadRequestError("Post already liked") from exc
    return like


def unlike_post(db: Session, caller: Caller, post_id: str) -> None:
    """Remove the caller's like. Earlier notifications are left in place."""
    user_id = caller.require()
    with unit_of_work(db):
        like = db.scalars(
            select(Like).where(Like.user_id == user_id, Like.post_id == post_id)
        ).first()
        if like is not None:
            db.delete(like)


def comment_on_post(
    db: Session, caller: Caller, post_id: str, data: CommentCreate
) -> CommentResponse:
    """Add a comment and notify the post author."""
    user_id = caller.require()
    post = _get_post(db, post_id)
    comment = Comment(post_id=post.id, user_id=user_id, content=data.content)
    with unit_of_work(db):
        db.add(comment)
        db.flush()
        fan_out(
            db,
            actor_id=user_id,
            owner_id=post.user_id,
            type_=NotificationType.COMMENT,
            content="commented on your post",
            target=TargetRef(TargetKind.POST, post.id),
        )
    db.refresh(comment)
    return CommentResponse.model_validate(comment)


def delete_post(db: Session, caller: Caller, post_id: str) -> None:
    """Delete a post owned by the caller."""
    user_id = caller.require()
    post = _get_post(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenError("You are not authorized to delete this post")
    with unit_of_work(db):
        db.delete(post)
    logger.info("User %s deleted post %s", user_id, post_id)


def react_to_post(db: Session, caller: Caller, post_id: str, reaction_type: str) -> str:
    """Toggle the caller's reaction on a post.

    Returns:
        "removed" when the same reaction is sent again, "updated" when the
        reaction type changes and "added" for a first reaction.
    """
    user_id = caller.require()
    post = _get_post(db, post_id)
    existing = db.scalars(
        select(Reaction).where(Reaction.user_id == user_id, Reaction.post_id == post.id)
    ).first()

    try:
        with unit_of_work(db):
            if existing is not None and existing.type == reaction_type:
                db.delete(existing)
                return "removed"
            if existing is not None:
                existing.type = reaction_type
                return "updated"
            target = TargetRef(TargetKind.POST, post.id)
            db.add(Reaction(user_id=user_id, type=reaction_type, target=target))
            db.flush()
            fan_out(
                db,
                actor_id=user_id,
                owner_id=post.user_id,
                type_=NotificationType.REACTION,
                content=f"reacted with {reaction_type} to your post",
                target=target,
            )
    except IntegrityError as exc:
        raise BadRequestError("You have already reacted to this post") from exc
    return "added"


def convert_post_type(
    db: Session, caller: Caller, post_id: str, data: ConvertPostTypeRequest
) -> PostResponse:
    """Change the media type of a post owned by the caller."""
    user_id = caller.require()
    post = _get_post(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenError("You are not authorized to modify this post")
    with unit_of_work(db):
        post.content_type = data.target_type
        post.content_url = data.new_content_url
        post.integrity_hash = _integrity_hash(data.new_content_url)
        post.updated_at = utcnow()
    db.refresh(post)
    return to_post_response(post)

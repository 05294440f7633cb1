"""Accounts, profiles and the follow graph."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from futuremedia.core import security
from futuremedia.core.caller import Caller
from futuremedia.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from futuremedia.db.session import unit_of_work
from futuremedia.models import Follow, NotificationType, Post, User
from futuremedia.schemas.common import UserSummary
from futuremedia.schemas.user import (
    LoginRequest,
    MeResponse,
    ProfileCounts,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
)
from futuremedia.services.notifications import fan_out
from futuremedia.services.pagination import CursorPage, paginate

logger = logging.getLogger(__name__)

__all__ = [
    "register",
    "login",
    "get_me",
    "get_by_username",
    "update_profile",
    "follow",
    "unfollow",
    "list_followers",
    "list_following",
    "reputation_score",
]


def register(db: Session, data: RegisterRequest) -> User:
    """Create an account with a hashed password.

    Raises:
        BadRequestError: If the email or username is already taken.
    """
    existing = db.scalars(
        select(User).where(or_(User.email == data.email, User.username == data.username))
    ).first()
    if existing is not None:
        raise BadRequestError("User with this email or username already exists")

    user = User(
        name=data.name,
        email=data.email,
        username=data.username,
        hashed_password=security.hash_password(data.password),
    )
    try:
        with unit_of_work(db):
            db.add(user)
    except IntegrityError as exc:
        # Lost a race with a concurrent registration.
        raise BadRequestError("User with this email or username already exists") from exc
    logger.info("Registered user %s", user.id)
    return user


def login(db: Session, data: LoginRequest) -> tuple[str, User]:
    """Exchange email and password for an access token."""
    user = db.scalars(select(User).where(User.email == data.email)).first()
    if user is None or not security.verify_password(user.hashed_password, data.password):
        raise UnauthorizedError("Invalid email or password")
    return security.create_access_token(user.id), user


def _counts(db: Session, user_id: str) -> ProfileCounts:
    followers = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    following = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    posts = db.scalar(select(func.count()).select_from(Post).where(Post.user_id == user_id))
    return ProfileCounts(followers=followers or 0, following=following or 0, posts=posts or 0)


def _profile(db: Session, user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "username": user.username,
        "bio": user.bio,
        "image": user.image,
        "cover_image": user.cover_image,
        "reputation_score": user.reputation_score,
        "created_at": user.created_at,
        "counts": _counts(db, user.id),
    }


def get_me(db: Session, caller: Caller) -> MeResponse:
    """Return the caller's own profile."""
    user = db.get(User, caller.require())
    if user is None:
        raise NotFoundError("User not found")
    return MeResponse(email=user.email, **_profile(db, user))


def get_by_username(db: Session, username: str) -> ProfileResponse:
    """Return a public profile looked up by username."""
    user = db.scalars(select(User).where(User.username == username)).first()
    if user is None:
        raise NotFoundError("User not found")
    return ProfileResponse(**_profile(db, user))


def update_profile(db: Session, caller: Caller, data: ProfileUpdateRequest) -> MeResponse:
    """Apply partial updates to the caller's profile."""
    user = db.get(User, caller.require())
    if user is None:
        raise NotFoundError("User not found")
    with unit_of_work(db):
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
    return get_me(db, caller)


def follow(db: Session, caller: Caller, target_id: str) -> Follow:
    """Follow another user and notify them.

    Raises:
        BadRequestError: Following yourself, or already following.
        NotFoundError: Unknown target user.
    """
    user_id = caller.require()
    if target_id == user_id:
        raise BadRequestError("You cannot follow yourself")
    if db.get(User, target_id) is None:
        raise NotFoundError("User not found")

    existing = db.scalars(
        select(Follow).where(Follow.follower_id == user_id, Follow.following_id == target_id)
    ).first()
    if existing is not None:
        raise BadRequestError("Already following this user")

    edge = Follow(follower_id=user_id, following_id=target_id)
    try:
        with unit_of_work(db):
            db.add(edge)
            db.flush()
            fan_out(
                db,
                actor_id=user_id,
                owner_id=target_id,
                type_=NotificationType.FOLLOW,
                content="started following you",
            )
    except IntegrityError as exc:
        logger.warning("Duplicate follow %s -> %s rejected by store", user_id, target_id)
        raise BadRequestError("Already following this user") from exc
    return edge


def unfollow(db: Session, caller: Caller, target_id: str) -> None:
    """Remove the follow edge if present."""
    user_id = caller.require()
    with unit_of_work(db):
        edge = db.scalars(
            select(Follow).where(Follow.follower_id == user_id, Follow.following_id == target_id)
        ).first()
        if edge is not None:
            db.delete(edge)


def list_followers(
    db: Session, user_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[UserSummary]:
    """Users following `user_id`, most recent first."""
    page = paginate(
        db,
        select(Follow).where(Follow.following_id == user_id),
        Follow,
        limit=limit,
        cursor=cursor,
    )
    return CursorPage(
        items=[UserSummary.model_validate(edge.follower) for edge in page.items],
        next_cursor=page.next_cursor,
    )


def list_following(
    db: Session, user_id: str, *, limit: int, cursor: str | None = None
) -> CursorPage[UserSummary]:
    """Users `user_id` follows, most recent first."""
    page = paginate(
        db,
        select(Follow).where(Follow.follower_id == user_id),
        Follow,
        limit=limit,
        cursor=cursor,
    )
    return CursorPage(
        items=[UserSummary.model_validate(edge.following) for edge in page.items],
        next_cursor=page.next_cursor,
    )


def reputation_score(db: Session, user_id: str) -> float:
    """Return the user's reputation score, or 0 for unknown users."""
    score = db.scalar(select(User.reputation_score).where(User.id == user_id))
    return float(score or 0)

"""A first reaction that loses a race to a concurrent insert is a client error."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from futuremedia.core.errors import BadRequestError
from futuremedia.models import Message, Notification, Reaction, TargetKind, TargetRef
from futuremedia.services import messages as message_service
from futuremedia.services import posts as post_service
from futuremedia.services import reels as reel_service
from futuremedia.services import stories as story_service


class _NoRows:
    def first(self):
        return None


def _hide_existing_reaction(monkeypatch, db_session) -> None:
    """Make the service's first lookup miss, as if the other insert had not committed yet."""
    real_scalars = db_session.scalars
    pending = [True]

    def scalars(*args, **kwargs):
        if pending:
            pending.pop()
            return _NoRows()
        return real_scalars(*args, **kwargs)

    monkeypatch.setattr(db_session, "scalars", scalars)


def _react_first(db_session, user_id: str, target: TargetRef) -> None:
    db_session.add(Reaction(user_id=user_id, type="👍", target=target))
    db_session.commit()


def _count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


def test_racing_post_reaction(db_session, monkeypatch, caller, test_user, test_post) -> None:
    _react_first(db_session, test_user.id, TargetRef(TargetKind.POST, test_post.id))
    _hide_existing_reaction(monkeypatch, db_session)

    with pytest.raises(BadRequestError):
        post_service.react_to_post(db_session, caller, test_post.id, "🎉")

    assert _count(db_session, Reaction) == 1
    assert _count(db_session, Notification) == 0


def test_racing_reel_reaction(
    db_session, monkeypatch, make_reel, caller, test_user, other_user
) -> None:
    reel = make_reel(other_user)
    _react_first(db_session, test_user.id, TargetRef(TargetKind.REEL, reel.id))
    _hide_existing_reaction(monkeypatch, db_session)

    with pytest.raises(BadRequestError):
        reel_service.react_to_reel(db_session, caller, reel.id, "🎉")

    assert _count(db_session, Reaction) == 1
    assert _count(db_session, Notification) == 0


def test_racing_story_reaction(
    db_session, monkeypatch, make_story, caller, test_user, other_user
) -> None:
    story = make_story(other_user)
    _react_first(db_session, test_user.id, TargetRef(TargetKind.STORY, story.id))
    _hide_existing_reaction(monkeypatch, db_session)

    with pytest.raises(BadRequestError):
        story_service.react_to_story(db_session, caller, story.id, "🎉")

    assert _count(db_session, Reaction) == 1
    assert _count(db_session, Notification) == 0


def test_racing_message_reaction(
    db_session, monkeypatch, caller, test_user, other_user
) -> None:
    message = Message(sender_id=other_user.id, receiver_id=test_user.id, content="hi")
    db_session.add(message)
    db_session.commit()
    _react_first(db_session, test_user.id, TargetRef(TargetKind.MESSAGE, message.id))
    _hide_existing_reaction(monkeypatch, db_session)

    with pytest.raises(BadRequestError):
        message_service.add_message_reaction(db_session, caller, message.id, "🎉")

    assert _count(db_session, Reaction) == 1

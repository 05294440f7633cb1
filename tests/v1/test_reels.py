"""Tests for reels, reel reactions and trending."""

from datetime import timedelta

from fastapi import status
from sqlalchemy import select

from futuremedia.db.time import utcnow
from futuremedia.models import Notification, Reaction
from tests.conftest import auth_headers


def test_create_reel(client, test_user, auth_token) -> None:
    r = client.post(
        "/api/v1/reels/",
        json={"video_url": "https://cdn.example.com/r.mp4", "caption": "hi"},
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_201_CREATED
    body = r.json()
    assert body["user"]["id"] == test_user.id
    assert body["reaction_count"] == 0
    assert body["user_reaction"] is None


def test_reel_feed_pagination_and_bounds(client, make_reel, test_user) -> None:
    reels = [make_reel(test_user, minute=m) for m in range(3)]

    page = client.get("/api/v1/reels/", params={"limit": 2}).json()
    assert [r["id"] for r in page["items"]] == [reels[2].id, reels[1].id]
    assert page["next_cursor"] == reels[0].id

    assert client.get("/api/v1/reels/", params={"limit": 21}).status_code == 422


def test_user_reels_limit_bound(client, test_user) -> None:
    url = f"/api/v1/users/{test_user.id}/reels"

    assert client.get(url, params={"limit": 50}).status_code == status.HTTP_200_OK
    assert client.get(url, params={"limit": 51}).status_code == 422


def test_reel_reaction_toggle_and_detail(
    client, db_session, make_reel, other_user, auth_token
) -> None:
    reel = make_reel(other_user)
    url = f"/api/v1/reels/{reel.id}/reactions"

    assert client.post(url, json={"type": "👍"}, headers=auth_token).json()["action"] == "added"

    detail = client.get(f"/api/v1/reels/{reel.id}", headers=auth_token).json()
    assert detail["reaction_count"] == 1
    assert detail["user_reaction"] == "👍"
    assert [r["type"] for r in detail["reactions"]] == ["👍"]

    [notification] = db_session.scalars(select(Notification)).all()
    assert notification.reel_id == reel.id
    assert notification.content == "reacted with 👍 to your reel"

    assert client.post(url, json={"type": "👍"}, headers=auth_token).json()["action"] == "removed"
    detail = client.get(f"/api/v1/reels/{reel.id}", headers=auth_token).json()
    assert detail["reaction_count"] == 0
    assert detail["user_reaction"] is None


def test_get_missing_reel(client) -> None:
    assert client.get(f"/api/v1/reels/{'f' * 32}").status_code == status.HTTP_404_NOT_FOUND


def test_delete_reel_owner_only(client, make_reel, other_user, auth_token, other_auth_token) -> None:
    reel = make_reel(other_user)

    assert client.delete(f"/api/v1/reels/{reel.id}", headers=auth_token).status_code == 403
    assert client.delete(f"/api/v1/reels/{reel.id}", headers=other_auth_token).status_code == 200


def test_trending_orders_by_recent_reactions(client, make_user, make_reel, test_user) -> None:
    quiet = make_reel(test_user, minute=1)
    popular = make_reel(test_user, minute=2)
    make_reel(test_user, minute=3)

    fans = [make_user() for _ in range(3)]
    for fan in fans:
        client.post(f"/api/v1/reels/{popular.id}/reactions", json={"type": "🔥"}, headers=auth_headers(fan))
    client.post(f"/api/v1/reels/{quiet.id}/reactions", json={"type": "🔥"}, headers=auth_headers(fans[0]))

    r = client.get("/api/v1/reels/trending", params={"timeframe": "day"})

    assert r.status_code == status.HTTP_200_OK
    reels = r.json()["reels"]
    assert [reel["id"] for reel in reels] == [popular.id, quiet.id]
    assert [reel["reaction_count"] for reel in reels] == [3, 1]


def test_trending_rejects_unknown_timeframe(client) -> None:
    r = client.get("/api/v1/reels/trending", params={"timeframe": "year"})

    assert r.status_code == 422


def test_trending_ignores_reactions_outside_window(
    client, db_session, make_reel, test_user, auth_token
) -> None:
    reel = make_reel(test_user)
    client.post(f"/api/v1/reels/{reel.id}/reactions", json={"type": "🔥"}, headers=auth_token)
    reaction = db_session.scalars(select(Reaction)).one()
    reaction.created_at = utcnow() - timedelta(days=2)
    db_session.commit()

    day = client.get("/api/v1/reels/trending", params={"timeframe": "day"}).json()
    week = client.get("/api/v1/reels/trending", params={"timeframe": "week"}).json()

    assert day["reels"] == []
    assert [r["id"] for r in week["reels"]] == [reel.id]

"""Tests for the notification listing and read-state endpoints."""

from fastapi import status
from sqlalchemy import select

from futuremedia.models import Notification, User
from tests.conftest import auth_headers


def _like_all(client, posts, headers) -> None:
    for post in posts:
        r = client.post(f"/api/v1/posts/{post.id}/like", headers=headers)
        assert r.status_code == status.HTTP_201_CREATED


def test_list_newest_first_with_cursor(
    client, make_post, test_user, auth_token, other_auth_token
) -> None:
    posts = [make_post(test_user, minute=m) for m in range(3)]
    _like_all(client, posts, other_auth_token)

    first = client.get("/api/v1/notifications/", params={"limit": 2}, headers=auth_token).json()
    assert [n["target"]["id"] for n in first["items"]] == [posts[2].id, posts[1].id]
    assert first["items"][0]["target"]["kind"] == "post"
    assert first["next_cursor"] is not None

    second = client.get(
        "/api/v1/notifications/",
        params={"limit": 2, "cursor": first["next_cursor"]},
        headers=auth_token,
    ).json()
    assert [n["target"]["id"] for n in second["items"]] == [posts[0].id]
    assert second["next_cursor"] is None


def test_list_requires_auth(client) -> None:
    assert client.get("/api/v1/notifications/").status_code == status.HTTP_401_UNAUTHORIZED


def test_list_only_shows_own_notifications(
    client, make_post, test_user, other_user, auth_token, other_auth_token
) -> None:
    _like_all(client, [make_post(test_user)], other_auth_token)

    mine = client.get("/api/v1/notifications/", headers=auth_token).json()
    theirs = client.get("/api/v1/notifications/", headers=other_auth_token).json()

    assert len(mine["items"]) == 1
    assert mine["items"][0]["sender"]["id"] == other_user.id
    assert theirs["items"] == []


def test_limit_bounds(client, auth_token) -> None:
    url = "/api/v1/notifications/"

    assert client.get(url, params={"limit": 0}, headers=auth_token).status_code == 422
    assert client.get(url, params={"limit": 101}, headers=auth_token).status_code == 422
    assert client.get(url, params={"limit": 100}, headers=auth_token).status_code == 200


def test_invalid_cursor(client, auth_token) -> None:
    r = client.get("/api/v1/notifications/", params={"cursor": "nope"}, headers=auth_token)

    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_only_unread_and_unread_count(
    client, make_post, test_user, auth_token, other_auth_token
) -> None:
    posts = [make_post(test_user, minute=m) for m in range(2)]
    _like_all(client, posts, other_auth_token)
    listing = client.get("/api/v1/notifications/", headers=auth_token).json()

    r = client.put(f"/api/v1/notifications/{listing['items'][0]['id']}/read", headers=auth_token)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["is_read"] is True

    unread = client.get(
        "/api/v1/notifications/", params={"only_unread": True}, headers=auth_token
    ).json()
    assert [n["id"] for n in unread["items"]] == [listing["items"][1]["id"]]
    count = client.get("/api/v1/notifications/unread-count", headers=auth_token).json()
    assert count == {"count": 1}


def test_mark_read_checks_receiver(
    client, make_post, test_user, auth_token, other_auth_token
) -> None:
    _like_all(client, [make_post(test_user)], other_auth_token)
    [item] = client.get("/api/v1/notifications/", headers=auth_token).json()["items"]

    r = client.put(f"/api/v1/notifications/{item['id']}/read", headers=other_auth_token)
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.put(f"/api/v1/notifications/{'1' * 32}/read", headers=auth_token)
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_read_all(client, make_post, test_user, auth_token, other_auth_token) -> None:
    _like_all(client, [make_post(test_user, minute=m) for m in range(3)], other_auth_token)

    r = client.put("/api/v1/notifications/read-all", headers=auth_token)

    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"count": 3}
    count = client.get("/api/v1/notifications/unread-count", headers=auth_token).json()
    assert count == {"count": 0}


def test_create_notification(client, test_user, other_user, test_post, auth_token) -> None:
    r = client.post(
        "/api/v1/notifications/",
        json={
            "receiver_id": other_user.id,
            "type": "MENTION",
            "content": "mentioned you",
            "post_id": test_post.id,
        },
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_201_CREATED
    body = r.json()
    assert body["sender_id"] == test_user.id
    assert body["target"] == {"kind": "post", "id": test_post.id}


def test_create_notification_rejects_mismatched_target(
    client, other_user, test_post, auth_token
) -> None:
    r = client.post(
        "/api/v1/notifications/",
        json={
            "receiver_id": other_user.id,
            "type": "STORY_VIEW",
            "content": "viewed your story",
            "post_id": test_post.id,
        },
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_create_notification_rejects_two_targets(
    client, make_reel, other_user, test_post, auth_token
) -> None:
    reel = make_reel(other_user)
    r = client.post(
        "/api/v1/notifications/",
        json={
            "receiver_id": other_user.id,
            "type": "MENTION",
            "content": "mentioned you twice",
            "post_id": test_post.id,
            "reel_id": reel.id,
        },
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_400_BAD_REQUEST


def test_create_notification_rejects_unknown_type(client, other_user, auth_token) -> None:
    r = client.post(
        "/api/v1/notifications/",
        json={"receiver_id": other_user.id, "type": "REACTION", "content": "x"},
        headers=auth_token,
    )

    assert r.status_code == 422


def test_create_notification_unknown_receiver(client, auth_token) -> None:
    r = client.post(
        "/api/v1/notifications/",
        json={"receiver_id": "2" * 32, "type": "SYSTEM", "content": "x"},
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_delete_notification(
    client, db_session, make_post, test_user, auth_token, other_auth_token
) -> None:
    _like_all(client, [make_post(test_user)], other_auth_token)
    [item] = client.get("/api/v1/notifications/", headers=auth_token).json()["items"]

    url = f"/api/v1/notifications/{item['id']}"
    assert client.delete(url, headers=other_auth_token).status_code == 403
    assert client.delete(url, headers=auth_token).status_code == 200
    assert db_session.scalars(select(Notification)).all() == []


def test_deleting_receiver_cascades(client, db_session, make_user, make_post) -> None:
    receiver = make_user("Receiver")
    sender = make_user("Sender")
    _like_all(client, [make_post(receiver)], auth_headers(sender))

    db_session.delete(db_session.get(User, receiver.id))
    db_session.commit()

    db_session.expire_all()
    assert db_session.scalars(select(Notification)).all() == []


def test_deleting_sender_keeps_notification(client, db_session, make_user, make_post) -> None:
    receiver = make_user("Receiver")
    sender = make_user("Sender")
    _like_all(client, [make_post(receiver)], auth_headers(sender))

    db_session.delete(db_session.get(User, sender.id))
    db_session.commit()

    db_session.expire_all()
    [notification] = db_session.scalars(select(Notification)).all()
    assert notification.sender_id is None
    assert notification.receiver_id == receiver.id

    listing = client.get("/api/v1/notifications/", headers=auth_headers(receiver)).json()
    assert listing["items"][0]["sender"] is None


def test_list_includes_referenced_item_summary(
    client, make_post, make_reel, test_user, auth_token, other_auth_token
) -> None:
    post = make_post(test_user, minute=1, caption="sunset")
    reel = make_reel(test_user, minute=2, caption="waves")
    _like_all(client, [post], other_auth_token)
    client.post(f"/api/v1/reels/{reel.id}/reactions", json={"type": "🔥"}, headers=other_auth_token)

    items = client.get("/api/v1/notifications/", headers=auth_token).json()["items"]

    by_kind = {item["target"]["kind"]: item for item in items}
    assert by_kind["post"]["post"]["caption"] == "sunset"
    assert by_kind["post"]["reel"] is None
    assert by_kind["reel"]["reel"] == {
        "id": reel.id,
        "video_url": reel.video_url,
        "caption": "waves",
    }
    assert by_kind["reel"]["post"] is None

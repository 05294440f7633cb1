"""Tests for posts, likes, comments and post reactions."""

import base64

from fastapi import status
from sqlalchemy import select

from futuremedia.models import Like, Notification, Post, Reaction, Tag
from tests.conftest import auth_headers


def _notifications(db_session):
    return db_session.scalars(select(Notification)).all()


def test_create_post_with_tags_and_integrity_hash(client, db_session, auth_token) -> None:
    url = "https://cdn.example.com/sunset.jpg"
    r = client.post(
        "/api/v1/posts/",
        json={
            "caption": "Sunset",
            "content_url": url,
            "content_type": "image",
            "tags": ["nature", "sky", "nature"],
        },
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_201_CREATED
    body = r.json()
    assert body["integrity_hash"] == base64.b64encode(url.encode()).decode()
    assert sorted(body["tags"]) == ["nature", "sky"]
    assert body["visibility"] == "public"


def test_existing_tags_are_reused(client, db_session, auth_token) -> None:
    for caption in ("one", "two"):
        client.post(
            "/api/v1/posts/",
            json={"caption": caption, "content_type": "text", "tags": ["daily"]},
            headers=auth_token,
        )

    assert len(db_session.scalars(select(Tag)).all()) == 1


def test_create_post_requires_auth(client) -> None:
    r = client.post("/api/v1/posts/", json={"caption": "x", "content_type": "text"})

    assert r.status_code == status.HTTP_401_UNAUTHORIZED


def test_feed_pages_newest_first(client, make_post, test_user) -> None:
    posts = [make_post(test_user, minute=m) for m in range(3)]

    first = client.get("/api/v1/posts/", params={"limit": 2}).json()
    assert [p["id"] for p in first["items"]] == [posts[2].id, posts[1].id]
    assert first["next_cursor"] == posts[0].id

    second = client.get(
        "/api/v1/posts/", params={"limit": 2, "cursor": first["next_cursor"]}
    ).json()
    assert [p["id"] for p in second["items"]] == [posts[0].id]
    assert second["next_cursor"] is None


def test_feed_limit_bounds(client) -> None:
    assert client.get("/api/v1/posts/", params={"limit": 0}).status_code == 422
    assert client.get("/api/v1/posts/", params={"limit": 101}).status_code == 422


def test_feed_invalid_cursor(client) -> None:
    r = client.get("/api/v1/posts/", params={"cursor": "does-not-exist"})

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == "Invalid cursor"


def test_get_post_with_stats(client, test_post, auth_token) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)
    client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "first"},
        headers=auth_token,
    )
    client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "second"},
        headers=auth_token,
    )

    r = client.get(f"/api/v1/posts/{test_post.id}", headers=auth_token)

    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["like_count"] == 1
    assert body["comment_count"] == 2
    assert body["is_liked"] is True
    assert [c["content"] for c in body["comments"]] == ["second", "first"]

    anonymous = client.get(f"/api/v1/posts/{test_post.id}").json()
    assert anonymous["is_liked"] is False


def test_get_missing_post(client) -> None:
    r = client.get(f"/api/v1/posts/{'c' * 32}")

    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_like_notifies_author(client, db_session, test_user, test_post, auth_token) -> None:
    r = client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)

    assert r.status_code == status.HTTP_201_CREATED
    [notification] = _notifications(db_session)
    assert notification.type == "LIKE"
    assert notification.content == "liked your post"
    assert notification.sender_id == test_user.id
    assert notification.receiver_id == test_post.user_id
    assert notification.post_id == test_post.id


def test_liking_own_post_does_not_notify(client, db_session, make_post, test_user, auth_token) -> None:
    post = make_post(test_user)

    r = client.post(f"/api/v1/posts/{post.id}/like", headers=auth_token)

    assert r.status_code == status.HTTP_201_CREATED
    assert _notifications(db_session) == []


def test_like_twice_is_rejected(client, db_session, test_post, auth_token) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)

    r = client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)

    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json()["detail"] == "Post already liked"
    assert len(db_session.scalars(select(Like)).all()) == 1
    assert len(_notifications(db_session)) == 1


def test_like_missing_post(client, auth_token) -> None:
    r = client.post(f"/api/v1/posts/{'d' * 32}/like", headers=auth_token)

    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_unlike_keeps_notification(client, db_session, test_post, auth_token) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)

    r = client.delete(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)

    assert r.status_code == status.HTTP_200_OK
    assert db_session.scalars(select(Like)).all() == []
    assert len(_notifications(db_session)) == 1


def test_comment_notifies_author(client, db_session, test_post, auth_token) -> None:
    r = client.post(
        f"/api/v1/posts/{test_post.id}/comments",
        json={"content": "Nice one"},
        headers=auth_token,
    )

    assert r.status_code == status.HTTP_201_CREATED
    assert r.json()["post_id"] == test_post.id
    [notification] = _notifications(db_session)
    assert notification.type == "COMMENT"
    assert notification.content == "commented on your post"


def test_delete_post_owner_only(client, db_session, test_post, auth_token, other_auth_token) -> None:
    r = client.delete(f"/api/v1/posts/{test_post.id}", headers=auth_token)
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.delete(f"/api/v1/posts/{test_post.id}", headers=other_auth_token)
    assert r.status_code == status.HTTP_200_OK
    db_session.expire_all()
    assert db_session.get(Post, test_post.id) is None


def test_deleting_post_cascades_to_its_notifications(
    client, db_session, test_post, auth_token, other_auth_token
) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/like", headers=auth_token)
    assert len(_notifications(db_session)) == 1

    client.delete(f"/api/v1/posts/{test_post.id}", headers=other_auth_token)

    db_session.expire_all()
    assert _notifications(db_session) == []


def test_user_posts_visibility(client, make_post, test_user, other_user, other_auth_token) -> None:
    public = make_post(test_user, minute=1, visibility="public")
    friends = make_post(test_user, minute=2, visibility="friends")
    private = make_post(test_user, minute=3, visibility="private")
    url = f"/api/v1/users/{test_user.id}/posts"

    anonymous = client.get(url).json()
    assert [p["id"] for p in anonymous["items"]] == [public.id]

    stranger = client.get(url, headers=other_auth_token).json()
    assert [p["id"] for p in stranger["items"]] == [friends.id, public.id]

    owner = client.get(url, headers=auth_headers(test_user)).json()
    assert [p["id"] for p in owner["items"]] == [private.id, friends.id, public.id]


def test_reaction_toggle(client, db_session, test_post, auth_token) -> None:
    url = f"/api/v1/posts/{test_post.id}/reactions"

    assert client.post(url, json={"type": "🔥"}, headers=auth_token).json()["action"] == "added"
    assert client.post(url, json={"type": "😂"}, headers=auth_token).json()["action"] == "updated"
    [reaction] = db_session.scalars(select(Reaction)).all()
    assert reaction.type == "😂"

    assert client.post(url, json={"type": "😂"}, headers=auth_token).json()["action"] == "removed"
    db_session.expire_all()
    assert db_session.scalars(select(Reaction)).all() == []

    # Only the first reaction fans out.
    [notification] = _notifications(db_session)
    assert notification.type == "REACTION"
    assert notification.content == "reacted with 🔥 to your post"
    assert notification.post_id == test_post.id


def test_convert_post_type(client, test_post, auth_token, other_auth_token) -> None:
    payload = {"target_type": "video", "new_content_url": "https://cdn.example.com/clip.mp4"}

    r = client.put(f"/api/v1/posts/{test_post.id}/type", json=payload, headers=auth_token)
    assert r.status_code == status.HTTP_403_FORBIDDEN

    r = client.put(f"/api/v1/posts/{test_post.id}/type", json=payload, headers=other_auth_token)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["content_type"] == "video"
    assert r.json()["content_url"] == payload["new_content_url"]

"""Integration tests for threaded comments."""
from __future__ import annotations

from uuid import UUID

import pytest

from mindcanvus.database import SessionLocal
from mindcanvus.models import Comment, Post


@pytest.fixture
def post_factory():
    def _factory(author, **fields) -> Post:
        with SessionLocal() as session:
            post = Post(
                user_id=author.id,
                title=fields.pop("title", "Discussion"),
                content="Talk below.",
                category="Other",
                status="draft",
                **fields,
            )
            session.add(post)
            session.commit()
            session.refresh(post)
            return post
    return _factory


def _comment(client, post_id, content, parent_id=None):
    payload = {"post_id": str(post_id), "content": content}
    if parent_id is not None:
        payload["parent_id"] = parent_id
    return client.post("/api/comments", json=payload)


def test_reply_is_nested_under_parent(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    post = post_factory(author)
    client = authed_client(author)

    parent = _comment(client, post.id, "Top level")
    assert parent.status_code == 201, parent.text
    reply = _comment(client, post.id, "A reply", parent.json()["id"])
    assert reply.status_code == 201
    assert reply.json()["parent_id"] == parent.json()["id"]

    listing = client.get(f"/api/comments/post/{post.id}").json()
    assert listing["pagination"]["total"] == 1
    [top] = listing["comments"]
    assert top["content"] == "Top level"
    assert [item["content"] for item in top["replies"]] == ["A reply"]


def test_reply_to_reply_is_rejected(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    post = post_factory(author)
    client = authed_client(author)

    parent = _comment(client, post.id, "Top level").json()
    reply = _comment(client, post.id, "Reply", parent["id"]).json()

    nested = _comment(client, post.id, "Too deep", reply["id"])
    assert nested.status_code == 400
    assert nested.json()["message"] == "Cannot reply to a reply"


def test_parent_must_belong_to_post(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    first = post_factory(author, title="First")
    second = post_factory(author, title="Second")
    client = authed_client(author)

    parent = _comment(client, first.id, "On the first post").json()
    response = _comment(client, second.id, "Wrong thread", parent["id"])

    assert response.status_code == 404


def test_comments_disabled(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    post = post_factory(author, allow_comments=False)

    response = _comment(authed_client(author), post.id, "Hello?")

    assert response.status_code == 400
    assert response.json()["message"] == "Comments are disabled for this post"


def test_edit_is_author_only(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    stranger = user_factory("stranger")
    post = post_factory(author)
    comment = _comment(authed_client(author), post.id, "Original").json()

    denied = authed_client(stranger).put(f"/api/comments/{comment['id']}", json={"content": "Edited"})
    assert denied.status_code == 403

    edited = authed_client(author).put(f"/api/comments/{comment['id']}", json={"content": "Edited"})
    assert edited.status_code == 200
    body = edited.json()
    assert body["content"] == "Edited"
    assert body["is_edited"] is True
    assert body["edited_at"] is not None


def test_soft_delete_hides_comment(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    admin = user_factory("moderator", role="admin")
    post = post_factory(author)
    client = authed_client(author)
    keep = _comment(client, post.id, "Keep me").json()
    drop = _comment(client, post.id, "Drop me").json()
    reply = _comment(client, post.id, "Reply to drop", keep["id"]).json()

    assert authed_client(user_factory("stranger")).delete(f"/api/comments/{drop['id']}").status_code == 403
    assert authed_client(author).delete(f"/api/comments/{drop['id']}").status_code == 200
    assert authed_client(admin).delete(f"/api/comments/{reply['id']}").status_code == 200

    listing = authed_client(author).get(f"/api/comments/post/{post.id}").json()
    assert [item["content"] for item in listing["comments"]] == ["Keep me"]
    assert listing["comments"][0]["replies"] == []

    with SessionLocal() as session:
        stored = session.get(Comment, UUID(drop["id"]))
        assert stored is not None
        assert stored.is_deleted is True
        assert stored.content == "[Comment deleted]"


def test_listing_sort_and_replies_endpoint(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    post = post_factory(author)
    client = authed_client(author)
    first = _comment(client, post.id, "first").json()
    _comment(client, post.id, "second")
    _comment(client, post.id, "reply one", first["id"])
    _comment(client, post.id, "reply two", first["id"])

    newest = client.get(f"/api/comments/post/{post.id}").json()
    assert [item["content"] for item in newest["comments"]] == ["second", "first"]

    oldest = client.get(f"/api/comments/post/{post.id}", params={"sort": "oldest"}).json()
    assert [item["content"] for item in oldest["comments"]] == ["first", "second"]

    replies = client.get(f"/api/comments/{first['id']}/replies", params={"limit": 1}).json()
    assert [item["content"] for item in replies["replies"]] == ["reply one"]
    assert replies["pagination"]["total"] == 2
    assert replies["pagination"]["hasNext"] is True


def test_comment_like_toggles(authed_client, user_factory, post_factory):
    author = user_factory("writer")
    post = post_factory(author)
    client = authed_client(author)
    comment = _comment(client, post.id, "Like me").json()

    liked = client.post(f"/api/comments/{comment['id']}/like").json()
    assert liked["is_liked"] is True
    assert liked["likes_count"] == 1

    listing = client.get(f"/api/comments/post/{post.id}").json()
    assert listing["comments"][0]["likes_count"] == 1

    unliked = client.post(f"/api/comments/{comment['id']}/like").json()
    assert unliked["is_liked"] is False
    assert unliked["likes_count"] == 0


def test_missing_post_returns_404(authed_client, user_factory):
    client = authed_client(user_factory("writer"))

    response = _comment(client, "00000000-0000-0000-0000-000000000000", "Hello")

    assert response.status_code == 404
    assert response.json()["message"] == "Post not found"

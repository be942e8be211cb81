"""Integration tests covering the friend request lifecycle."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select

from mindcanvus.database import SessionLocal
from mindcanvus.models import FriendRequest, user_friends


def _friend_ids(client) -> set[str]:
    response = client.get("/api/friends")
    assert response.status_code == 200, response.text
    return {friend["id"] for friend in response.json()["friends"]}


def test_request_appears_on_recipient_list(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    response = authed_client(alice).post(f"/api/friends/request/{bob.id}")
    assert response.status_code == 201
    assert response.json()["success"] is True

    listing = authed_client(bob).get("/api/friends/requests")
    assert listing.status_code == 200
    body = listing.json()
    assert len(body["requests"]) == 1
    entry = body["requests"][0]
    assert entry["from"]["username"] == "alice"
    assert entry["status"] == "pending"
    assert body["pagination"]["total"] == 1
    assert body["pagination"]["hasNext"] is False

    sent = authed_client(alice).get("/api/friends/requests/sent")
    assert [user["username"] for user in sent.json()["sent_requests"]] == ["bob"]


def test_request_guards(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)

    self_request = client.post(f"/api/friends/request/{alice.id}")
    assert self_request.status_code == 400
    assert self_request.json() == {"message": "You cannot send friend request to yourself"}

    missing = client.post(f"/api/friends/request/{uuid4()}")
    assert missing.status_code == 404

    assert client.post(f"/api/friends/request/{bob.id}").status_code == 201
    duplicate = client.post(f"/api/friends/request/{bob.id}")
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "Friend request already sent"


def test_accept_makes_friendship_symmetric(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    authed_client(alice).post(f"/api/friends/request/{bob.id}")
    accepted = authed_client(bob).put(f"/api/friends/accept/{alice.id}")
    assert accepted.status_code == 200, accepted.text

    assert _friend_ids(authed_client(bob)) == {str(alice.id)}
    assert _friend_ids(authed_client(alice)) == {str(bob.id)}

    with SessionLocal() as session:
        assert session.scalars(select(FriendRequest)).all() == []
        edges = session.execute(select(user_friends.c.user_id, user_friends.c.friend_id)).all()
        assert {(row.user_id, row.friend_id) for row in edges} == {(alice.id, bob.id), (bob.id, alice.id)}

    again = authed_client(bob).put(f"/api/friends/accept/{alice.id}")
    assert again.status_code == 404

    already = authed_client(alice).post(f"/api/friends/request/{bob.id}")
    assert already.status_code == 400
    assert already.json()["message"] == "Already friends with this user"


def test_reject_consumes_request_and_allows_resend(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    authed_client(alice).post(f"/api/friends/request/{bob.id}")
    rejected = authed_client(bob).put(f"/api/friends/reject/{alice.id}")
    assert rejected.status_code == 200

    assert authed_client(bob).put(f"/api/friends/accept/{alice.id}").status_code == 404
    assert authed_client(bob).get("/api/friends/requests").json()["requests"] == []

    resend = authed_client(alice).post(f"/api/friends/request/{bob.id}")
    assert resend.status_code == 201


def test_cancel_is_idempotent(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)

    client.post(f"/api/friends/request/{bob.id}")
    assert client.delete(f"/api/friends/request/{bob.id}").status_code == 200
    assert client.delete(f"/api/friends/request/{bob.id}").status_code == 200
    assert client.get("/api/friends/requests/sent").json()["sent_requests"] == []

    assert client.delete(f"/api/friends/request/{uuid4()}").status_code == 404

    resend = client.post(f"/api/friends/request/{bob.id}")
    assert resend.status_code == 201
    assert [user["username"] for user in client.get("/api/friends/requests/sent").json()["sent_requests"]] == ["bob"]


def test_accepting_crossed_requests_clears_both(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    assert authed_client(alice).post(f"/api/friends/request/{bob.id}").status_code == 201
    assert authed_client(bob).post(f"/api/friends/request/{alice.id}").status_code == 201

    accepted = authed_client(bob).put(f"/api/friends/accept/{alice.id}")
    assert accepted.status_code == 200, accepted.text

    incoming = authed_client(alice).get("/api/friends/requests").json()
    assert incoming["requests"] == []
    assert incoming["pagination"]["total"] == 0
    assert authed_client(bob).get("/api/friends/requests/sent").json()["sent_requests"] == []
    assert authed_client(alice).put(f"/api/friends/accept/{bob.id}").status_code == 404

    with SessionLocal() as session:
        assert session.scalars(select(FriendRequest)).all() == []


def test_remove_friend_clears_both_sides(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    befriend(alice, bob)

    removed = authed_client(alice).delete(f"/api/friends/{bob.id}")
    assert removed.status_code == 200

    assert _friend_ids(authed_client(alice)) == set()
    assert _friend_ids(authed_client(bob)) == set()

    again = authed_client(alice).delete(f"/api/friends/{bob.id}")
    assert again.status_code == 400
    assert again.json()["message"] == "Not friends with this user"


def test_friends_list_paginates(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    for name in ("bob", "carol", "dave"):
        befriend(alice, user_factory(name))

    response = authed_client(alice).get("/api/friends", params={"page": 1, "limit": 2})
    body = response.json()
    assert [friend["username"] for friend in body["friends"]] == ["bob", "carol"]
    assert body["pagination"] == {"current": 1, "pages": 2, "total": 3, "hasNext": True, "hasPrev": False}


def test_suggestions_skip_self_and_friends_but_keep_pending(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    dave = user_factory("dave")
    befriend(alice, bob)
    authed_client(alice).post(f"/api/friends/request/{carol.id}")

    response = authed_client(alice).get("/api/friends/suggestions")
    assert response.status_code == 200
    usernames = {item["username"] for item in response.json()["suggestions"]}
    assert usernames == {carol.username, dave.username}
    assert all("followers_count" in item for item in response.json()["suggestions"])


def test_suggestions_order_newest_then_most_followed(authed_client, user_factory):
    alice = user_factory("alice", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
    fan = user_factory("fan", created_at=datetime(2026, 2, 1, tzinfo=timezone.utc))
    joined = datetime(2026, 3, 1, tzinfo=timezone.utc)
    quiet = user_factory("quiet", created_at=joined)
    followed = user_factory("followed", created_at=joined)
    assert authed_client(fan).post(f"/api/users/{followed.id}/follow").status_code == 201

    response = authed_client(alice).get("/api/friends/suggestions")
    assert response.status_code == 200
    suggestions = response.json()["suggestions"]
    assert [item["username"] for item in suggestions] == [followed.username, quiet.username, fan.username]
    assert [item["followers_count"] for item in suggestions] == [1, 0, 0]

"""Integration tests for direct messaging between friends."""
from __future__ import annotations

from uuid import uuid4


def test_only_friends_can_message(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)

    response = client.post(f"/api/messages/{bob.id}", json={"content": "hi"})
    assert response.status_code == 403
    assert response.json() == {"message": "You can only message your friends"}

    missing = client.post(f"/api/messages/{uuid4()}", json={"content": "hi"})
    assert missing.status_code == 404
    assert missing.json()["message"] == "Recipient not found"


def test_only_sender_side_of_friendship_is_checked(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    befriend(alice, bob, mutual=False)

    sent = authed_client(alice).post(f"/api/messages/{bob.id}", json={"content": "  hello bob  "})
    assert sent.status_code == 201, sent.text
    assert sent.json()["content"] == "hello bob"
    assert sent.json()["is_read"] is False

    reply = authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": "hi"})
    assert reply.status_code == 403


def test_blank_message_is_rejected(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    befriend(alice, bob)

    response = authed_client(alice).post(f"/api/messages/{bob.id}", json={"content": "   "})

    assert response.status_code == 400
    assert response.json()["message"] == "Message content is required"


def test_conversations_group_by_counterpart(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    befriend(alice, bob)
    befriend(alice, carol)

    authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": "one"})
    authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": "two"})
    authed_client(alice).post(f"/api/messages/{bob.id}", json={"content": "three"})
    authed_client(carol).post(f"/api/messages/{alice.id}", json={"content": "from carol"})

    response = authed_client(alice).get("/api/messages/conversations")
    assert response.status_code == 200, response.text
    conversations = response.json()["conversations"]

    assert [item["user"]["username"] for item in conversations] == ["carol", "bob"]
    by_user = {item["user"]["username"]: item for item in conversations}
    assert by_user["bob"]["last_message"]["content"] == "three"
    assert by_user["bob"]["unread_count"] == 2
    assert by_user["carol"]["unread_count"] == 1

    bob_view = authed_client(bob).get("/api/messages/conversations").json()["conversations"]
    assert len(bob_view) == 1
    assert bob_view[0]["unread_count"] == 1


def test_reading_thread_marks_messages_read(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    befriend(alice, bob)

    for text in ("first", "second", "third"):
        authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": text})

    assert authed_client(alice).get("/api/messages/unread/count").json() == {"unread_count": 3}

    page = authed_client(alice).get(f"/api/messages/{bob.id}", params={"limit": 2}).json()
    assert [item["content"] for item in page["messages"]] == ["third", "second"]
    assert all(item["is_read"] for item in page["messages"])
    assert page["pagination"]["total"] == 3

    assert authed_client(alice).get("/api/messages/unread/count").json() == {"unread_count": 1}


def test_mark_conversation_read_returns_count(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    befriend(alice, bob)
    authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": "ping"})
    authed_client(bob).post(f"/api/messages/{alice.id}", json={"content": "pong"})

    first = authed_client(alice).put(f"/api/messages/{bob.id}/read")
    assert first.status_code == 200
    assert first.json() == {"success": True, "count": 2}

    second = authed_client(alice).put(f"/api/messages/{bob.id}/read")
    assert second.json()["count"] == 0


def test_thread_with_unknown_user_is_404(authed_client, user_factory):
    response = authed_client(user_factory("alice")).get(f"/api/messages/{uuid4()}")

    assert response.status_code == 404

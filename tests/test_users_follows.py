"""Integration tests for the user directory and follower graph."""
from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from mindcanvus.database import SessionLocal
from mindcanvus.models import Post


def test_follow_and_unfollow(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)

    followed = client.post(f"/api/users/{bob.id}/follow")
    assert followed.status_code == 201
    body = followed.json()
    assert body["status"] == "followed"
    assert body["followers_count"] == 1
    assert body["is_following"] is True

    again = client.post(f"/api/users/{bob.id}/follow")
    assert again.status_code == 400
    assert again.json()["message"] == "Already following this user"

    assert client.post(f"/api/users/{alice.id}/follow").status_code == 400
    assert client.post(f"/api/users/{uuid4()}/follow").status_code == 404

    followers = client.get(f"/api/users/{bob.id}/followers").json()
    assert [user["username"] for user in followers["users"]] == ["alice"]
    following = client.get(f"/api/users/{alice.id}/following").json()
    assert [user["username"] for user in following["users"]] == ["bob"]

    unfollowed = client.delete(f"/api/users/{bob.id}/follow")
    assert unfollowed.status_code == 200
    assert unfollowed.json()["status"] == "unfollowed"
    assert unfollowed.json()["followers_count"] == 0

    not_following = client.delete(f"/api/users/{bob.id}/follow")
    assert not_following.status_code == 400
    assert not_following.json()["message"] == "Not following this user"


def test_public_profile_counts(authed_client, user_factory, befriend):
    alice = user_factory("alice", bio="Writer")
    bob = user_factory("bob")
    befriend(alice, bob)
    authed_client(bob).post(f"/api/users/{alice.id}/follow")

    with SessionLocal() as session:
        session.add_all(
            [
                Post(
                    user_id=alice.id,
                    title="Out",
                    content="c",
                    category="Fun",
                    status="published",
                    published_at=datetime.now(timezone.utc),
                ),
                Post(user_id=alice.id, title="Draft", content="c", category="Fun", status="draft"),
            ]
        )
        session.commit()

    response = authed_client(bob).get("/api/users/alice")
    assert response.status_code == 200
    profile = response.json()
    assert profile["bio"] == "Writer"
    assert profile["followers_count"] == 1
    assert profile["following_count"] == 0
    assert profile["friends_count"] == 1
    assert profile["posts_count"] == 1

    assert authed_client(bob).get("/api/users/nobody").status_code == 404


def test_search_is_case_insensitive_and_ranked(authed_client, user_factory):
    popular = user_factory("Sam_popular")
    user_factory("sammy")
    user_factory("unrelated", first_name="Jo")
    fan = user_factory("fan")
    authed_client(fan).post(f"/api/users/{popular.id}/follow")

    response = authed_client(fan).get("/api/users/search", params={"q": "SAM"})
    assert response.status_code == 200
    body = response.json()
    assert [user["username"] for user in body["users"]] == ["Sam_popular", "sammy"]
    assert body["users"][0]["followers_count"] == 1
    assert body["pagination"]["total"] == 2

    empty = authed_client(fan).get("/api/users/search", params={"q": "  "})
    assert empty.status_code == 400


def test_search_matches_regular_expressions(authed_client, user_factory):
    user_factory("sammy")
    user_factory("awesome_sam")
    user_factory("jo", last_name="Samson")
    fan = user_factory("fan")
    client = authed_client(fan)

    anchored = client.get("/api/users/search", params={"q": "^sam"}).json()
    assert [user["username"] for user in anchored["users"]] == ["jo", "sammy"]

    suffix = client.get("/api/users/search", params={"q": "sam$"}).json()
    assert [user["username"] for user in suffix["users"]] == ["awesome_sam"]

    assert client.get("/api/users/search", params={"q": "[sam"}).status_code == 400


def test_follow_suggestions_skip_followed_and_friends(authed_client, user_factory, befriend):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    dave = user_factory("dave")
    befriend(alice, bob)
    authed_client(alice).post(f"/api/users/{carol.id}/follow")

    response = authed_client(alice).get("/api/users/suggestions")

    assert response.status_code == 200
    assert [user["username"] for user in response.json()["suggestions"]] == [dave.username]


def test_follow_stats_for_anonymous_viewer(anon_client, user_factory):
    bob = user_factory("bob")

    response = anon_client.get(f"/api/users/{bob.id}/follow-stats")

    assert response.status_code == 200
    assert response.json() == {
        "user_id": str(bob.id),
        "followers_count": 0,
        "following_count": 0,
        "is_following": False,
    }

"""Integration tests for registration, login and bearer tokens."""
from __future__ import annotations

from uuid import UUID

from mindcanvus.services.auth_service import create_access_token, decode_access_token


def _register(client, username: str = "alice", email: str = "alice@example.com", password: str = "password123"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password, "first_name": "Alice"},
    )


def test_register_login_and_me(anon_client):
    registered = _register(anon_client)
    assert registered.status_code == 201, registered.text
    body = registered.json()
    assert body["username"] == "alice"
    assert body["token_type"] == "bearer"

    by_username = anon_client.post("/api/auth/login", json={"username": "alice", "password": "password123"})
    assert by_username.status_code == 200
    by_email = anon_client.post("/api/auth/login", json={"username": "Alice@Example.com", "password": "password123"})
    assert by_email.status_code == 200

    token = by_username.json()["access_token"]
    me = anon_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == "alice"
    assert me.json()["email"] == "alice@example.com"
    assert me.json()["first_name"] == "Alice"


def test_wrong_password_is_unauthorized(anon_client):
    _register(anon_client)

    response = anon_client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid credentials"}


def test_duplicate_username_and_email(anon_client):
    assert _register(anon_client).status_code == 201

    same_name = _register(anon_client, email="other@example.com")
    assert same_name.status_code == 400
    assert same_name.json()["message"] == "Username already taken"

    same_email = _register(anon_client, username="alice2", email="ALICE@example.com")
    assert same_email.status_code == 400
    assert same_email.json()["message"] == "Email already registered"


def test_register_validation(anon_client):
    response = _register(anon_client, username="a b", password="123")

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"


def test_bad_token_is_rejected(anon_client):
    response = anon_client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, token failed"


def test_token_round_trip():
    subject = UUID("12345678-1234-5678-1234-567812345678")

    assert decode_access_token(create_access_token(subject)) == subject


def test_health(anon_client):
    response = anon_client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"

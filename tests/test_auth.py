"""Integration tests for the identity endpoints feeding the friendship routes."""
from __future__ import annotations

import os
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_friendships.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Friendship, User  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(Friendship))
        session.execute(delete(User))
        session.commit()
    yield


def _register(client: TestClient, username: str, password: str) -> dict:
    response = client.post("/auth/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_register_login_and_me() -> None:
    with TestClient(app) as client:
        reg = _register(client, "carol", "password123")
        assert reg["token_type"] == "bearer"

        login = client.post("/auth/login", json={"username": "carol", "password": "password123"})
        assert login.status_code == 200
        assert login.json()["user_id"] == reg["user_id"]

        me = client.get("/auth/me", headers=_auth(login.json()["access_token"]))
        assert me.status_code == 200
        assert me.json()["username"] == "carol"


def test_login_with_wrong_password_is_rejected() -> None:
    with TestClient(app) as client:
        _register(client, "dave", "password123")
        login = client.post("/auth/login", json={"username": "dave", "password": "wrong-password"})
        assert login.status_code == 401


def test_duplicate_username_is_conflict() -> None:
    with TestClient(app) as client:
        _register(client, "erin", "password123")
        again = client.post("/auth/register", json={"username": "erin", "password": "password123"})
        assert again.status_code == 409


def test_invalid_token_is_rejected() -> None:
    with TestClient(app) as client:
        me = client.get("/auth/me", headers=_auth("not-a-jwt"))
        assert me.status_code == 401


def test_friendship_flow_with_real_tokens() -> None:
    with TestClient(app) as client:
        alice = _register(client, "alice", "password123")
        bob = _register(client, "bob", "password123")

        sent = client.post(
            "/friendships/requests/send",
            json={"friend_user_id": bob["user_id"]},
            headers=_auth(alice["access_token"]),
        )
        assert sent.status_code == 204, sent.text

        accepted = client.post(
            "/friendships/requests/accept",
            json={"friend_user_id": alice["user_id"]},
            headers=_auth(bob["access_token"]),
        )
        assert accepted.status_code == 204, accepted.text

"""Integration tests for the friendship request endpoints."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete, select, text

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_friendships.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Friendship, FriendshipStatus, User  # noqa: E402
from app.services import get_current_user  # noqa: E402
from app.services import friendship_request_service  # noqa: E402


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


@pytest.fixture
def user_factory() -> Callable[[str], User]:
    def _factory(username: str) -> User:
        with SessionLocal() as session:
            user = User(username=username, hashed_password="test-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            return user
    return _factory


@pytest.fixture
def authed_client() -> Iterator[Callable[[User], TestClient]]:
    with TestClient(app) as client:
        def _with_user(user: User) -> TestClient:
            def _override() -> User:
                return user
            app.dependency_overrides[get_current_user] = _override
            return client
        yield _with_user
    app.dependency_overrides.clear()


def _edge_status(user: User, friend: User) -> FriendshipStatus | None:
    with SessionLocal() as session:
        return session.scalar(
            select(Friendship.status).where(
                Friendship.user_id == user.id,
                Friendship.friend_user_id == friend.id,
            )
        )


def _post(client: TestClient, action: str, friend: User | None = None, friend_id: str | None = None):
    target = friend_id if friend_id is not None else str(friend.id)
    return client.post(f"/friendships/requests/{action}", json={"friend_user_id": target})


def test_send_then_accept_returns_no_content(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    sent = _post(authed_client(alice), "send", bob)
    assert sent.status_code == 204, sent.text
    assert sent.content == b""

    accepted = _post(authed_client(bob), "accept", alice)
    assert accepted.status_code == 204, accepted.text
    assert _edge_status(alice, bob) == FriendshipStatus.ACCEPTED
    assert _edge_status(bob, alice) == FriendshipStatus.ACCEPTED


def test_send_to_unknown_user_is_bad_request(authed_client, user_factory):
    alice = user_factory("alice")

    response = _post(authed_client(alice), "send", friend_id=str(uuid4()))

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "target_not_found"


def test_duplicate_send_is_conflict(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(alice)

    assert _post(client, "send", bob).status_code == 204
    duplicate = _post(client, "send", bob)

    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == {
        "code": "edge_already_active",
        "message": "Friendship already exists",
    }


def test_answer_without_pending_request_is_bad_request(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    client = authed_client(bob)

    for action in ("accept", "decline"):
        response = _post(client, action, alice)
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "edge_not_pending"


def test_decline_then_resend(authed_client, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    assert _post(authed_client(alice), "send", bob).status_code == 204
    assert _post(authed_client(bob), "decline", alice).status_code == 204
    assert _edge_status(alice, bob) == FriendshipStatus.DECLINED
    assert _edge_status(bob, alice) is None

    assert _post(authed_client(alice), "send", bob).status_code == 204
    assert _edge_status(alice, bob) == FriendshipStatus.REQUESTED


def test_malformed_payload_is_rejected(authed_client, user_factory):
    alice = user_factory("alice")

    response = authed_client(alice).post("/friendships/requests/send", json={"friend_user_id": "not-a-uuid"})

    assert response.status_code == 422


def test_requests_require_bearer_token(user_factory):
    bob = user_factory("bob")
    with TestClient(app) as client:
        response = _post(client, "send", bob)
    assert response.status_code == 401


class _BrokenInsert:
    """Replaces the dialect insert so the reverse-edge step targets a missing table."""

    def __init__(self, table) -> None:
        self.table = table

    def values(self, **kwargs):
        return self

    def on_conflict_do_nothing(self, **kwargs):
        return text("INSERT INTO missing_friendships_table (id) VALUES (1)")


def test_store_failure_during_accept_is_server_error(authed_client, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")
    assert _post(authed_client(alice), "send", bob).status_code == 204
    monkeypatch.setattr(friendship_request_service, "_dialect_insert", lambda session: _BrokenInsert)

    response = _post(authed_client(bob), "accept", alice)

    assert response.status_code == 500
    assert response.json()["detail"]["code"] == "transaction_failed"
    assert _edge_status(alice, bob) == FriendshipStatus.REQUESTED
    assert _edge_status(bob, alice) is None

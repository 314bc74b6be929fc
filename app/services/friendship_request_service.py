"""Business logic for sending, accepting and declining friendship requests.

A friendship is stored as two directed edges, ``(user_id, friend_user_id)`` and
its reverse. Every mutation below first consults an explicit guard and only
touches the store once the guard allows it:

* ``send`` inserts ``(caller, friend, requested)`` or resets a declined edge,
  in a single conditional upsert.
* ``accept`` marks both directions accepted inside one transaction.
* ``decline`` moves the pending edge to declined, re-checking the status in
  the update predicate so a racing answer becomes a no-op.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, cast
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Friendship, FriendshipStatus, User

logger = logging.getLogger(__name__)

_NATURAL_KEY = ["user_id", "friend_user_id"]


class FriendshipErrorKind(str, Enum):
    TARGET_NOT_FOUND = "target_not_found"
    EDGE_NOT_PENDING = "edge_not_pending"
    EDGE_ALREADY_ACTIVE = "edge_already_active"
    TRANSACTION_FAILED = "transaction_failed"


_DEFAULT_MESSAGES: dict[FriendshipErrorKind, str] = {
    FriendshipErrorKind.TARGET_NOT_FOUND: "User not found",
    FriendshipErrorKind.EDGE_NOT_PENDING: "No pending friendship request from this user",
    FriendshipErrorKind.EDGE_ALREADY_ACTIVE: "Friendship already exists",
    FriendshipErrorKind.TRANSACTION_FAILED: "Unable to update friendship",
}


class FriendshipRequestError(RuntimeError):
    """Raised when a friendship mutation is denied or cannot be persisted."""

    def __init__(self, kind: FriendshipErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message or _DEFAULT_MESSAGES[kind]
        super().__init__(self.message)


@dataclass(slots=True, frozen=True)
class GuardResult:
    allowed: bool
    reason: FriendshipErrorKind | None = None

    def raise_if_denied(self) -> None:
        if not self.allowed:
            raise FriendshipRequestError(cast(FriendshipErrorKind, self.reason))


_ALLOWED = GuardResult(allowed=True)


def _dialect_insert(db: Session) -> Callable[..., Any]:
    """Return the ``insert`` construct supporting ON CONFLICT for the bound dialect."""

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Friendship upserts are not supported on the {dialect!r} dialect")


def _store_failure(db: Session, exc: SQLAlchemyError, action: str) -> FriendshipRequestError:
    db.rollback()
    logger.exception("Failed to %s friendship request", action)
    return FriendshipRequestError(FriendshipErrorKind.TRANSACTION_FAILED)


def check_can_send(db: Session, *, friend_user_id: UUID) -> GuardResult:
    """Allow a request only towards a user that exists."""

    target = db.scalar(select(User.id).where(User.id == friend_user_id).limit(1))
    if target is None:
        return GuardResult(allowed=False, reason=FriendshipErrorKind.TARGET_NOT_FOUND)
    return _ALLOWED


def check_can_answer(db: Session, *, user_id: UUID, friend_user_id: UUID) -> GuardResult:
    """Allow an answer only from the invited party of a pending request.

    The edge ``friend_user_id -> user_id`` must exist with status ``requested``.
    """

    pending = db.scalar(
        select(Friendship.id)
        .where(
            Friendship.user_id == friend_user_id,
            Friendship.friend_user_id == user_id,
            Friendship.status == FriendshipStatus.REQUESTED,
        )
        .limit(1)
    )
    if pending is None:
        return GuardResult(allowed=False, reason=FriendshipErrorKind.EDGE_NOT_PENDING)
    return _ALLOWED


def send_friendship_request(db: Session, *, user: User, friend_user_id: UUID) -> None:
    """Create ``(user, friend, requested)`` or reset a declined edge to requested.

    Raises ``EDGE_ALREADY_ACTIVE`` when the edge is already requested or accepted.
    """

    user_id = cast(UUID, user.id)
    check_can_send(db, friend_user_id=friend_user_id).raise_if_denied()

    insert = _dialect_insert(db)
    stmt = (
        insert(Friendship)
        .values(user_id=user_id, friend_user_id=friend_user_id, status=FriendshipStatus.REQUESTED)
        .on_conflict_do_update(
            index_elements=_NATURAL_KEY,
            set_={"status": FriendshipStatus.REQUESTED, "updated_at": func.now()},
            where=Friendship.status == FriendshipStatus.DECLINED,
        )
        .returning(Friendship.id)
    )

    try:
        edge_id = db.execute(stmt).scalar_one_or_none()
        if edge_id is None:
            db.rollback()
        else:
            db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, exc, "send") from exc

    if edge_id is None:
        raise FriendshipRequestError(FriendshipErrorKind.EDGE_ALREADY_ACTIVE)
    logger.info("Friendship request sent from %s to %s", user_id, friend_user_id)


def accept_friendship_request(db: Session, *, user: User, friend_user_id: UUID) -> None:
    """Accept the pending request from ``friend_user_id`` and mirror it.

    Both edges end up ``accepted`` or, on any failure, nothing changes.
    """

    user_id = cast(UUID, user.id)
    check_can_answer(db, user_id=user_id, friend_user_id=friend_user_id).raise_if_denied()

    insert = _dialect_insert(db)
    try:
        # A decline that landed after the guard leaves nothing to accept.
        accepted = db.execute(
            update(Friendship)
            .where(
                Friendship.user_id == friend_user_id,
                Friendship.friend_user_id == user_id,
                Friendship.status.in_([FriendshipStatus.REQUESTED, FriendshipStatus.ACCEPTED]),
            )
            .values(status=FriendshipStatus.ACCEPTED)
        ).rowcount
        if accepted == 0:
            db.rollback()
        else:
            db.execute(
                update(Friendship)
                .where(Friendship.user_id == user_id, Friendship.friend_user_id == friend_user_id)
                .values(status=FriendshipStatus.ACCEPTED)
            )
            db.execute(
                insert(Friendship)
                .values(user_id=user_id, friend_user_id=friend_user_id, status=FriendshipStatus.ACCEPTED)
                .on_conflict_do_nothing(index_elements=_NATURAL_KEY)
            )
            db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, exc, "accept") from exc

    if accepted == 0:
        raise FriendshipRequestError(FriendshipErrorKind.EDGE_NOT_PENDING)
    logger.info("Friendship between %s and %s accepted", friend_user_id, user_id)


def decline_friendship_request(db: Session, *, user: User, friend_user_id: UUID) -> bool:
    """Decline the pending request from ``friend_user_id``.

    Returns ``False`` when the edge stopped being pending between the guard and
    the update. The HTTP route answers 204 either way; the flag only feeds the
    log line below and lets callers tell a lost race from a real decline. The
    reverse edge is never touched.
    """

    user_id = cast(UUID, user.id)
    check_can_answer(db, user_id=user_id, friend_user_id=friend_user_id).raise_if_denied()

    try:
        declined = db.execute(
            update(Friendship)
            .where(
                Friendship.user_id == friend_user_id,
                Friendship.friend_user_id == user_id,
                Friendship.status == FriendshipStatus.REQUESTED,
            )
            .values(status=FriendshipStatus.DECLINED)
        ).rowcount
        db.commit()
    except SQLAlchemyError as exc:
        raise _store_failure(db, exc, "decline") from exc

    if declined == 0:
        logger.info("Decline of request %s -> %s skipped; request no longer pending", friend_user_id, user_id)
        return False
    logger.info("Friendship request from %s declined by %s", friend_user_id, user_id)
    return True


__all__ = [
    "FriendshipErrorKind",
    "FriendshipRequestError",
    "GuardResult",
    "check_can_send",
    "check_can_answer",
    "send_friendship_request",
    "accept_friendship_request",
    "decline_friendship_request",
]

"""ORM model for directed friendship edges between two users."""
from __future__ import annotations

import enum

from sqlalchemy import Column, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base
from .base import TimestampMixin, UUIDPrimaryKeyMixin


class FriendshipStatus(str, enum.Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Friendship(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """One party's view of a friendship: the edge ``user_id -> friend_user_id``.

    The reverse direction is a separate row. ``(user_id, friend_user_id)`` is
    the natural key and is unique.
    """

    __tablename__ = "friendships"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    friend_user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(
            FriendshipStatus,
            name="friendship_status",
            values_callable=lambda statuses: [item.value for item in statuses],
        ),
        nullable=False,
        default=FriendshipStatus.REQUESTED,
    )

    user = relationship("User", foreign_keys=[user_id], back_populates="outgoing_friendships")
    friend = relationship("User", foreign_keys=[friend_user_id], back_populates="incoming_friendships")

    __table_args__ = (UniqueConstraint("user_id", "friend_user_id", name="uq_friendships_user_friend"),)

    def __repr__(self) -> str:
        return f"<Friendship(user_id={self.user_id}, friend_user_id={self.friend_user_id}, status={self.status})>"


__all__ = ["Friendship", "FriendshipStatus"]

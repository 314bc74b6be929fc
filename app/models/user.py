"""SQLAlchemy ORM model for application users."""
from __future__ import annotations

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.database import Base
from .base import TimestampMixin, UUIDPrimaryKeyMixin
from .friendship import Friendship


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "users"

    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    outgoing_friendships = relationship(
        Friendship,
        foreign_keys=[Friendship.user_id],
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    incoming_friendships = relationship(
        Friendship,
        foreign_keys=[Friendship.friend_user_id],
        back_populates="friend",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["User"]

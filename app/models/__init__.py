"""Convenience exports for ORM models."""
from .base import TimestampMixin, UUIDPrimaryKeyMixin
from .friendship import Friendship, FriendshipStatus
from .user import User

__all__ = [
    "Friendship",
    "FriendshipStatus",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "User",
]

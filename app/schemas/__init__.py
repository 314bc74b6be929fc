"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from .friendships import FriendshipErrorDetail, FriendshipRequestPayload

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    "FriendshipErrorDetail",
    "FriendshipRequestPayload",
]

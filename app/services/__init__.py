"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    hash_password,
    register_user,
    verify_password,
)
from .friendship_request_service import (
    FriendshipErrorKind,
    FriendshipRequestError,
    GuardResult,
    accept_friendship_request,
    check_can_answer,
    check_can_send,
    decline_friendship_request,
    send_friendship_request,
)

__all__ = [
    "authenticate_user",
    "register_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "hash_password",
    "verify_password",
    "FriendshipErrorKind",
    "FriendshipRequestError",
    "GuardResult",
    "check_can_send",
    "check_can_answer",
    "send_friendship_request",
    "accept_friendship_request",
    "decline_friendship_request",
]

"""Aggregate router exports."""
from .auth import router as auth_router
from .friendship_requests import router as friendship_requests_router

__all__ = [
    "auth_router",
    "friendship_requests_router",
]

"""Schemas for friendship request mutations."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class FriendshipRequestPayload(BaseModel):
    """Body shared by the send, accept and decline endpoints."""

    friend_user_id: UUID = Field(..., description="The other party of the friendship edge")


class FriendshipErrorDetail(BaseModel):
    code: str
    message: str


__all__ = ["FriendshipRequestPayload", "FriendshipErrorDetail"]

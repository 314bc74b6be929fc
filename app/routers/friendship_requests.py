"""Friendship request mutation routes."""
from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import FriendshipErrorDetail, FriendshipRequestPayload
from ..services import (
    FriendshipErrorKind,
    FriendshipRequestError,
    accept_friendship_request,
    decline_friendship_request,
    get_current_user,
    send_friendship_request,
)

router = APIRouter(prefix="/friendships/requests", tags=["friendships"])

_STATUS_BY_KIND = {
    FriendshipErrorKind.TARGET_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    FriendshipErrorKind.EDGE_NOT_PENDING: status.HTTP_400_BAD_REQUEST,
    FriendshipErrorKind.EDGE_ALREADY_ACTIVE: status.HTTP_409_CONFLICT,
    FriendshipErrorKind.TRANSACTION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise_http(exc: FriendshipRequestError) -> NoReturn:
    detail = FriendshipErrorDetail(code=exc.kind.value, message=exc.message)
    raise HTTPException(status_code=_STATUS_BY_KIND[exc.kind], detail=detail.model_dump()) from exc


@router.post("/send", status_code=status.HTTP_204_NO_CONTENT)
async def send_friendship_request_endpoint(
    payload: FriendshipRequestPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    try:
        send_friendship_request(db, user=current_user, friend_user_id=payload.friend_user_id)
    except FriendshipRequestError as exc:
        _raise_http(exc)


@router.post("/accept", status_code=status.HTTP_204_NO_CONTENT)
async def accept_friendship_request_endpoint(
    payload: FriendshipRequestPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    try:
        accept_friendship_request(db, user=current_user, friend_user_id=payload.friend_user_id)
    except FriendshipRequestError as exc:
        _raise_http(exc)


@router.post("/decline", status_code=status.HTTP_204_NO_CONTENT)
async def decline_friendship_request_endpoint(
    payload: FriendshipRequestPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> None:
    try:
        decline_friendship_request(db, user=current_user, friend_user_id=payload.friend_user_id)
    except FriendshipRequestError as exc:
        _raise_http(exc)


__all__ = ["router"]

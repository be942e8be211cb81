"""Friend request lifecycle and symmetric friend lists.

A request from A to B lives in ``friend_requests`` only while it is pending.
Accepting it writes both ``user_friends`` edges (A, B) and (B, A) and deletes
the request in the same commit; rejecting or cancelling deletes it, which
returns the pair to the "no relationship" state so A may ask again.
"""
from __future__ import annotations

import logging
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Follow, FriendRequest, User, user_friends
from .user_service import get_user_or_404

logger = logging.getLogger(__name__)


def _are_friends(db: Session, user_id: UUID, friend_id: UUID) -> bool:
    stmt = select(user_friends.c.user_id).where(
        and_(user_friends.c.user_id == user_id, user_friends.c.friend_id == friend_id)
    )
    return db.execute(stmt).first() is not None


def _pending_request(db: Session, sender_id: UUID, recipient_id: UUID) -> FriendRequest | None:
    stmt = select(FriendRequest).where(
        FriendRequest.sender_id == sender_id,
        FriendRequest.recipient_id == recipient_id,
        FriendRequest.status == "pending",
    )
    return db.scalar(stmt)


def send_friend_request(db: Session, *, requester: User, target_id: UUID) -> FriendRequest:
    requester_id = cast(UUID, requester.id)
    if requester_id == target_id:
        logger.info("User %s attempted to befriend themselves", requester_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot send friend request to yourself")

    target = db.get(User, target_id)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if _are_friends(db, requester_id, target_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Already friends with this user")

    if _pending_request(db, requester_id, target_id) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Friend request already sent")

    request = FriendRequest(sender_id=requester_id, recipient_id=target_id, status="pending")
    try:
        db.add(request)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send request") from exc

    db.refresh(request)
    logger.info("Friend request sent from %s to %s", requester_id, target_id)
    return request


def accept_friend_request(db: Session, *, accepter: User, requester_id: UUID) -> None:
    accepter_id = cast(UUID, accepter.id)
    request = _pending_request(db, requester_id, accepter_id)
    if request is None:
        logger.info("No pending friend request from %s to %s", requester_id, accepter_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Friend request not found")

    requesting_user = db.get(User, requester_id)
    if requesting_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    current_user = get_user_or_404(db, accepter_id)

    if _are_friends(db, accepter_id, requester_id) or _are_friends(db, requester_id, accepter_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Users are already friends")

    # Both edges and the consumed request share one unit of work.
    current_user.friends.append(requesting_user)
    requesting_user.friends.append(current_user)
    db.delete(request)
    crossed = _pending_request(db, accepter_id, requester_id)
    if crossed is not None:
        db.delete(crossed)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to accept friend request from %s to %s", requester_id, accepter_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to accept request") from exc

    logger.info("Friend request accepted between %s and %s", accepter_id, requester_id)


def reject_friend_request(db: Session, *, accepter: User, requester_id: UUID) -> None:
    accepter_id = cast(UUID, accepter.id)
    request = _pending_request(db, requester_id, accepter_id)
    if request is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Friend request not found")

    try:
        db.delete(request)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to reject request") from exc

    logger.info("Friend request from %s rejected by %s", requester_id, accepter_id)


def cancel_friend_request(db: Session, *, requester: User, target_id: UUID) -> int:
    """Withdraw any pending request to ``target_id``; returns how many were removed."""

    requester_id = cast(UUID, requester.id)
    get_user_or_404(db, target_id)

    stmt = delete(FriendRequest).where(
        FriendRequest.sender_id == requester_id,
        FriendRequest.recipient_id == target_id,
        FriendRequest.status == "pending",
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to cancel request") from exc

    removed = result.rowcount or 0
    if removed:
        logger.info("Friend request from %s to %s cancelled", requester_id, target_id)
    return removed


def remove_friend(db: Session, *, user: User, friend_id: UUID) -> None:
    user_id = cast(UUID, user.id)
    get_user_or_404(db, friend_id)

    if not _are_friends(db, user_id, friend_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not friends with this user")

    stmt = delete(user_friends).where(
        (and_(user_friends.c.user_id == user_id, user_friends.c.friend_id == friend_id))
        | (and_(user_friends.c.user_id == friend_id, user_friends.c.friend_id == user_id))
    )
    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to remove friend") from exc

    logger.info("Friendship between %s and %s removed", user_id, friend_id)


def list_friends(db: Session, *, user: User, page: int, limit: int) -> tuple[list[User], int]:
    user_id = cast(UUID, user.id)
    total = db.scalar(select(func.count()).select_from(user_friends).where(user_friends.c.user_id == user_id)) or 0
    stmt = (
        select(User)
        .join(user_friends, user_friends.c.friend_id == User.id)
        .where(user_friends.c.user_id == user_id)
        .order_by(user_friends.c.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(db.scalars(stmt)), int(total)


def list_incoming_requests(db: Session, *, user: User, page: int, limit: int) -> tuple[list[FriendRequest], int]:
    """Pending requests addressed to ``user``, paginated in memory."""

    user_id = cast(UUID, user.id)
    stmt = (
        select(FriendRequest)
        .where(FriendRequest.recipient_id == user_id)
        .options(selectinload(FriendRequest.sender))
        .order_by(FriendRequest.created_at.asc())
    )
    pending = [req for req in db.scalars(stmt) if req.status == "pending" and req.sender is not None]
    skip = (page - 1) * limit
    return pending[skip : skip + limit], len(pending)


def list_sent_requests(db: Session, *, user: User, page: int, limit: int) -> tuple[list[User], int]:
    user_id = cast(UUID, user.id)
    conditions = (FriendRequest.sender_id == user_id, FriendRequest.status == "pending")
    total = db.scalar(select(func.count()).select_from(FriendRequest).where(*conditions)) or 0
    stmt = (
        select(User)
        .join(FriendRequest, FriendRequest.recipient_id == User.id)
        .where(*conditions)
        .order_by(FriendRequest.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(db.scalars(stmt)), int(total)


def list_friend_suggestions(
    db: Session,
    *,
    user: User,
    page: int,
    limit: int,
) -> tuple[list[tuple[User, int]], int]:
    """Everyone except ``user`` and their friends, newest first then most followed.

    Users with a pending request in either direction are still included.
    """

    user_id = cast(UUID, user.id)
    friend_ids = select(user_friends.c.friend_id).where(user_friends.c.user_id == user_id)
    conditions = (User.id != user_id, User.id.not_in(friend_ids))

    followers_count = (
        select(func.count())
        .select_from(Follow)
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    total = db.scalar(select(func.count()).select_from(User).where(*conditions)) or 0
    stmt = (
        select(User, followers_count.label("followers_count"))
        .where(*conditions)
        .order_by(User.created_at.desc(), followers_count.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = [(row[0], int(row[1] or 0)) for row in db.execute(stmt).all()]
    return rows, int(total)


def require_friendship(db: Session, *, user: User, friend_id: UUID) -> User:
    """Return the friend when ``friend_id`` is in ``user``'s friends, else 403."""

    friend = db.get(User, friend_id)
    if friend is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipient not found")
    if not _are_friends(db, cast(UUID, user.id), friend_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only message your friends")
    return friend


__all__ = [
    "send_friend_request",
    "accept_friend_request",
    "reject_friend_request",
    "cancel_friend_request",
    "remove_friend",
    "list_friends",
    "list_incoming_requests",
    "list_sent_requests",
    "list_friend_suggestions",
    "require_friendship",
]

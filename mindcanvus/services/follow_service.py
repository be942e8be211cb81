"""Business logic for follower relationships."""
from __future__ import annotations

from dataclasses import dataclass
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Follow, User
from .user_service import get_user_or_404


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def follow_user(db: Session, *, follower: User, target_id: UUID) -> None:
    follower_id = cast(UUID, follower.id)
    if follower_id == target_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot follow yourself")

    get_user_or_404(db, target_id)

    existing = db.get(Follow, (follower_id, target_id))
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Already following this user")

    db.add(Follow(follower_id=follower_id, following_id=target_id))
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to follow user") from exc


def unfollow_user(db: Session, *, follower: User, target_id: UUID) -> None:
    follower_id = cast(UUID, follower.id)
    get_user_or_404(db, target_id)

    record = db.get(Follow, (follower_id, target_id))
    if record is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Not following this user")
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to unfollow user") from exc


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    get_user_or_404(db, user_id)

    followers_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    ) or 0
    following_count = db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    ) or 0

    is_following = False
    if viewer_id is not None:
        is_following = db.get(Follow, (viewer_id, user_id)) is not None

    return FollowStats(
        user_id=user_id,
        followers_count=int(followers_count),
        following_count=int(following_count),
        is_following=is_following,
    )


def list_followers(db: Session, *, user_id: UUID, page: int, limit: int) -> tuple[list[User], int]:
    get_user_or_404(db, user_id)
    total = db.scalar(select(func.count()).select_from(Follow).where(Follow.following_id == user_id)) or 0
    stmt = (
        select(User)
        .join(Follow, Follow.follower_id == User.id)
        .where(Follow.following_id == user_id)
        .order_by(Follow.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(db.scalars(stmt)), int(total)


def list_following(db: Session, *, user_id: UUID, page: int, limit: int) -> tuple[list[User], int]:
    get_user_or_404(db, user_id)
    total = db.scalar(select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)) or 0
    stmt = (
        select(User)
        .join(Follow, Follow.following_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(db.scalars(stmt)), int(total)


__all__ = [
    "FollowStats",
    "follow_user",
    "unfollow_user",
    "get_follow_stats",
    "list_followers",
    "list_following",
]

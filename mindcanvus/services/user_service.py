"""User directory lookups: profiles, search and follow suggestions."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Follow, Post, User, user_friends
from .search import regex_any, validate_pattern


@dataclass(slots=True)
class ProfileStats:
    user: User
    followers_count: int
    following_count: int
    friends_count: int
    posts_count: int


def get_user_or_404(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _followers_count_column():
    return (
        select(func.count())
        .select_from(Follow)
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )


def get_profile(db: Session, *, username: str) -> ProfileStats:
    user = db.scalar(select(User).where(User.username == username))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user_id = cast(UUID, user.id)

    followers = db.scalar(select(func.count()).select_from(Follow).where(Follow.following_id == user_id)) or 0
    following = db.scalar(select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)) or 0
    friends = db.scalar(select(func.count()).select_from(user_friends).where(user_friends.c.user_id == user_id)) or 0
    posts = db.scalar(
        select(func.count())
        .select_from(Post)
        .where(
            Post.user_id == user_id,
            Post.status == "published",
            Post.published_at <= datetime.now(timezone.utc),
        )
    ) or 0

    return ProfileStats(
        user=user,
        followers_count=int(followers),
        following_count=int(following),
        friends_count=int(friends),
        posts_count=int(posts),
    )


def search_users(db: Session, *, query: str, page: int, limit: int) -> tuple[list[tuple[User, int]], int]:
    text = (query or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query is required")

    condition = regex_any([User.username, User.first_name, User.last_name], validate_pattern(text))
    total = db.scalar(select(func.count()).select_from(User).where(condition)) or 0

    followers_count = _followers_count_column()
    stmt = (
        select(User, followers_count.label("followers_count"))
        .where(condition)
        .order_by(followers_count.desc(), User.username.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = [(row[0], int(row[1] or 0)) for row in db.execute(stmt).all()]
    return rows, int(total)


def follow_suggestions(db: Session, *, user: User, limit: int) -> list[tuple[User, int]]:
    """Users the viewer neither follows nor is friends with, most followed first."""

    user_id = cast(UUID, user.id)
    following_ids = select(Follow.following_id).where(Follow.follower_id == user_id)
    friend_ids = select(user_friends.c.friend_id).where(user_friends.c.user_id == user_id)

    followers_count = _followers_count_column()
    stmt = (
        select(User, followers_count.label("followers_count"))
        .where(User.id != user_id, User.id.not_in(following_ids), User.id.not_in(friend_ids))
        .order_by(followers_count.desc())
        .limit(limit)
    )
    return [(row[0], int(row[1] or 0)) for row in db.execute(stmt).all()]


__all__ = ["ProfileStats", "get_user_or_404", "get_profile", "search_users", "follow_suggestions"]

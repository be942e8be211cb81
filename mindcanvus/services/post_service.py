"""Business logic for blog posts: authoring, listing, likes and view counts."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import EXCERPT_LENGTH
from ..models import Comment, Post, PostLike, User
from ..schemas import PostCreate, PostUpdate, UserSummary
from .search import regex_any, validate_pattern

logger = logging.getLogger(__name__)

_PRIVILEGED_ROLES = {"admin"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """Normalise client timestamps to UTC; naive values are taken as UTC."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _derive_excerpt(content: str) -> str:
    text = " ".join(content.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[:EXCERPT_LENGTH].rstrip() + "..."


def _likes_count_column():
    return (
        select(func.count(PostLike.id))
        .where(PostLike.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def _comments_count_column():
    return (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id, Comment.is_deleted.is_(False))
        .correlate(Post)
        .scalar_subquery()
    )


def _can_manage(post: Post, requester: User) -> bool:
    role = (getattr(requester, "role", None) or "").lower()
    return post.user_id == requester.id or role in _PRIVILEGED_ROLES


def get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _liked_post_ids(db: Session, viewer_id: UUID | None, post_ids: Iterable[UUID]) -> set[UUID]:
    ids = list(post_ids)
    if viewer_id is None or not ids:
        return set()
    stmt = select(PostLike.post_id).where(PostLike.user_id == viewer_id, PostLike.post_id.in_(ids))
    return set(db.scalars(stmt))


def _to_record(post: Post, *, likes_count: int, comments_count: int, is_liked: bool) -> dict[str, Any]:
    return {
        "id": post.id,
        "author": UserSummary.model_validate(post.author),
        "title": post.title,
        "content": post.content,
        "excerpt": post.excerpt,
        "category": post.category,
        "tags": list(post.tags or []),
        "featured_image": post.featured_image,
        "status": post.status,
        "scheduled_for": post.scheduled_for,
        "published_at": post.published_at,
        "views": int(post.views or 0),
        "is_public": bool(post.is_public),
        "allow_comments": bool(post.allow_comments),
        "likes_count": likes_count,
        "comments_count": comments_count,
        "is_liked": is_liked,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def get_post_record(db: Session, *, post_id: UUID, viewer_id: UUID | None = None) -> dict[str, Any]:
    post = get_post_or_404(db, post_id)
    likes_count = db.scalar(select(func.count(PostLike.id)).where(PostLike.post_id == post_id)) or 0
    comments_count = db.scalar(
        select(func.count(Comment.id)).where(Comment.post_id == post_id, Comment.is_deleted.is_(False))
    ) or 0
    is_liked = post_id in _liked_post_ids(db, viewer_id, [post_id])
    return _to_record(post, likes_count=int(likes_count), comments_count=int(comments_count), is_liked=is_liked)


def _records_from_rows(db: Session, rows: list[Any], viewer_id: UUID | None) -> list[dict[str, Any]]:
    liked = _liked_post_ids(db, viewer_id, (row[0].id for row in rows))
    return [
        _to_record(post, likes_count=int(likes or 0), comments_count=int(comments or 0), is_liked=post.id in liked)
        for post, likes, comments in rows
    ]


def create_post(db: Session, *, author: User, payload: PostCreate) -> Post:
    """Create and persist a new post for ``author``."""

    scheduled_for = _as_utc(payload.scheduled_for)
    if payload.status == "scheduled" and scheduled_for is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Scheduled date is required for scheduled posts",
        )

    excerpt = (payload.excerpt or "").strip() or _derive_excerpt(payload.content)
    post = Post(
        user_id=author.id,
        title=payload.title.strip(),
        content=payload.content,
        excerpt=excerpt,
        category=payload.category,
        tags=list(payload.tags),
        featured_image=payload.featured_image,
        status=payload.status,
        scheduled_for=scheduled_for,
        published_at=_now() if payload.status == "published" else None,
        is_public=payload.is_public,
        allow_comments=payload.allow_comments,
    )

    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error creating post") from exc

    db.refresh(post)
    logger.info("Post %s created by %s with status %s", post.id, author.id, post.status)
    return post


_NON_NULLABLE_FIELDS = {"title", "content", "category", "tags", "status", "is_public", "allow_comments"}


def update_post(db: Session, *, post_id: UUID, requester: User, payload: PostUpdate) -> Post:
    post = get_post_or_404(db, post_id)
    if not _can_manage(post, requester):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to update this post")

    changes = payload.model_dump(exclude_unset=True)
    for field in _NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            changes.pop(field)

    next_status = changes.pop("status", post.status)
    if "scheduled_for" in changes:
        scheduled_for = _as_utc(changes.pop("scheduled_for"))
    else:
        scheduled_for = post.scheduled_for

    if next_status == "scheduled" and scheduled_for is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Scheduled date is required for scheduled posts",
        )

    if "title" in changes:
        changes["title"] = changes["title"].strip()
    for field, value in changes.items():
        setattr(post, field, value)

    post.status = next_status
    post.scheduled_for = scheduled_for
    if next_status == "published" and post.published_at is None:
        post.published_at = _now()

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error updating post") from exc

    db.refresh(post)
    return post


def delete_post(db: Session, *, post_id: UUID, requester: User) -> None:
    """Delete a post together with its comments and likes."""

    post = get_post_or_404(db, post_id)
    if not _can_manage(post, requester):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this post")

    try:
        db.delete(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error deleting post") from exc

    logger.info("Post %s deleted by %s", post_id, requester.id)


def list_posts(
    db: Session,
    *,
    page: int,
    limit: int,
    category: str | None = None,
    author_id: UUID | None = None,
    search: str | None = None,
    sort: str = "latest",
    viewer_id: UUID | None = None,
) -> tuple[list[dict[str, Any]], int]:
    """Return published posts matching the filters plus the total match count."""

    conditions = [Post.status == "published", Post.published_at <= _now()]
    if category:
        conditions.append(Post.category == category)
    if author_id is not None:
        conditions.append(Post.user_id == author_id)
    term = validate_pattern(search or "")
    if term:
        conditions.append(regex_any([Post.title, Post.content, Post.excerpt], term))

    likes_count = _likes_count_column()
    comments_count = _comments_count_column()

    if sort == "oldest":
        ordering = [Post.published_at.asc()]
    elif sort == "popular":
        ordering = [likes_count.desc(), Post.views.desc()]
    elif sort == "views":
        ordering = [Post.views.desc()]
    else:
        ordering = [Post.published_at.desc()]

    total = db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
    stmt = (
        select(Post, likes_count.label("likes_count"), comments_count.label("comments_count"))
        .options(selectinload(Post.author))
        .where(*conditions)
        .order_by(*ordering)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = db.execute(stmt).all()
    return _records_from_rows(db, rows, viewer_id), int(total)


def list_user_posts(
    db: Session,
    *,
    author_id: UUID,
    post_status: str,
    viewer: User | None,
    page: int,
    limit: int,
) -> tuple[list[dict[str, Any]], int]:
    """Posts by one author; drafts and scheduled posts are visible to the author only."""

    conditions = [Post.user_id == author_id]
    if post_status == "published":
        conditions.extend([Post.status == "published", Post.published_at <= _now()])
    else:
        if viewer is None or viewer.id != author_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view these posts")
        if post_status != "all":
            conditions.append(Post.status == post_status)

    likes_count = _likes_count_column()
    comments_count = _comments_count_column()
    total = db.scalar(select(func.count(Post.id)).where(*conditions)) or 0
    stmt = (
        select(Post, likes_count.label("likes_count"), comments_count.label("comments_count"))
        .options(selectinload(Post.author))
        .where(*conditions)
        .order_by(Post.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = db.execute(stmt).all()
    viewer_id = cast(UUID, viewer.id) if viewer is not None else None
    return _records_from_rows(db, rows, viewer_id), int(total)


def increment_post_views(db: Session, *, post_id: UUID) -> None:
    """Bump the view counter; every call counts, there is no per-viewer dedup."""

    try:
        db.execute(update(Post).where(Post.id == post_id).values(views=Post.views + 1))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to increment views for post %s", post_id)


def toggle_post_like(db: Session, *, post_id: UUID, user_id: UUID) -> dict[str, Any]:
    get_post_or_404(db, post_id)

    existing = db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id))
    if existing is None:
        db.add(PostLike(post_id=post_id, user_id=user_id))
        is_liked = True
    else:
        db.delete(existing)
        is_liked = False

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    likes_count = db.scalar(select(func.count(PostLike.id)).where(PostLike.post_id == post_id)) or 0
    return {"post_id": post_id, "is_liked": is_liked, "likes_count": int(likes_count)}


def category_counts(db: Session) -> list[dict[str, Any]]:
    """Number of published posts per category, largest first."""

    count_col = func.count(Post.id).label("count")
    stmt = (
        select(Post.category, count_col)
        .where(Post.status == "published")
        .group_by(Post.category)
        .order_by(count_col.desc(), Post.category.asc())
    )
    return [{"category": category, "count": int(count)} for category, count in db.execute(stmt).all()]


__all__ = [
    "get_post_or_404",
    "get_post_record",
    "create_post",
    "update_post",
    "delete_post",
    "list_posts",
    "list_user_posts",
    "increment_post_views",
    "toggle_post_like",
    "category_counts",
]

"""Threaded comments on posts with one level of replies."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..constants import DELETED_COMMENT_PLACEHOLDER
from ..models import Comment, CommentLike, User
from ..schemas import CommentCreate, UserSummary
from .post_service import get_post_or_404

logger = logging.getLogger(__name__)


def _comment_likes(db: Session, comment_ids: Iterable[UUID]) -> dict[UUID, int]:
    ids = list(comment_ids)
    if not ids:
        return {}
    stmt = (
        select(CommentLike.comment_id, func.count(CommentLike.id))
        .where(CommentLike.comment_id.in_(ids))
        .group_by(CommentLike.comment_id)
    )
    return {comment_id: int(count) for comment_id, count in db.execute(stmt).all()}


def _to_record(comment: Comment, likes: dict[UUID, int], replies: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "author": UserSummary.model_validate(comment.author),
        "content": comment.content,
        "parent_id": comment.parent_id,
        "likes_count": likes.get(comment.id, 0),
        "is_edited": bool(comment.is_edited),
        "edited_at": comment.edited_at,
        "is_deleted": bool(comment.is_deleted),
        "created_at": comment.created_at,
        "replies": replies or [],
    }


def get_comment_or_404(db: Session, comment_id: UUID) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    return comment


def comment_record(db: Session, comment: Comment) -> dict[str, Any]:
    """Serialise a single comment with its visible replies."""

    replies = [reply for reply in comment.replies if not reply.is_deleted]
    likes = _comment_likes(db, [comment.id, *(reply.id for reply in replies)])
    return _to_record(comment, likes, [_to_record(reply, likes) for reply in replies])


def list_post_comments(
    db: Session,
    *,
    post_id: UUID,
    page: int,
    limit: int,
    sort: str = "newest",
) -> tuple[list[dict[str, Any]], int]:
    """Top-level comments for a post, each carrying its non-deleted replies."""

    get_post_or_404(db, post_id)

    conditions = (Comment.post_id == post_id, Comment.parent_id.is_(None), Comment.is_deleted.is_(False))
    ordering = Comment.created_at.asc() if sort == "oldest" else Comment.created_at.desc()

    total = db.scalar(select(func.count(Comment.id)).where(*conditions)) or 0
    stmt = (
        select(Comment)
        .where(*conditions)
        .options(selectinload(Comment.author), selectinload(Comment.replies).selectinload(Comment.author))
        .order_by(ordering)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    comments = list(db.scalars(stmt))

    visible_replies = {c.id: [r for r in c.replies if not r.is_deleted] for c in comments}
    all_ids = [c.id for c in comments] + [r.id for replies in visible_replies.values() for r in replies]
    likes = _comment_likes(db, all_ids)

    records = [
        _to_record(comment, likes, [_to_record(reply, likes) for reply in visible_replies[comment.id]])
        for comment in comments
    ]
    return records, int(total)


def create_comment(db: Session, *, author: User, payload: CommentCreate) -> Comment:
    post = get_post_or_404(db, payload.post_id)
    if not post.allow_comments:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comments are disabled for this post")

    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content is required")

    if payload.parent_id is not None:
        parent = db.get(Comment, payload.parent_id)
        if parent is None or parent.post_id != post.id:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parent comment not found")
        # Only one level of nesting.
        if parent.parent_id is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot reply to a reply")

    comment = Comment(post_id=post.id, user_id=author.id, parent_id=payload.parent_id, content=content)
    try:
        db.add(comment)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create comment") from exc

    db.refresh(comment)
    logger.info("Comment %s added to post %s by %s", comment.id, post.id, author.id)
    return comment


def update_comment(db: Session, *, comment_id: UUID, requester: User, content: str) -> Comment:
    comment = get_comment_or_404(db, comment_id)
    if comment.is_deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")
    if comment.user_id != requester.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to edit this comment")

    text = content.strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment content is required")

    comment.content = text
    comment.is_edited = True
    comment.edited_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update comment") from exc

    db.refresh(comment)
    return comment


def delete_comment(db: Session, *, comment_id: UUID, requester: User) -> None:
    """Soft delete: the row stays so replies keep their parent."""

    comment = get_comment_or_404(db, comment_id)
    is_admin = (getattr(requester, "role", None) or "").lower() == "admin"
    if comment.user_id != requester.id and not is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this comment")

    comment.is_deleted = True
    comment.content = DELETED_COMMENT_PLACEHOLDER
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete comment") from exc

    logger.info("Comment %s deleted by %s", comment_id, requester.id)


def toggle_comment_like(db: Session, *, comment_id: UUID, user_id: UUID) -> dict[str, Any]:
    comment = get_comment_or_404(db, comment_id)
    if comment.is_deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found")

    existing = db.scalar(
        select(CommentLike).where(CommentLike.comment_id == comment_id, CommentLike.user_id == user_id)
    )
    if existing is None:
        db.add(CommentLike(comment_id=comment_id, user_id=user_id))
        is_liked = True
    else:
        db.delete(existing)
        is_liked = False

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    likes_count = db.scalar(select(func.count(CommentLike.id)).where(CommentLike.comment_id == comment_id)) or 0
    return {"comment_id": comment_id, "is_liked": is_liked, "likes_count": int(likes_count)}


def list_comment_replies(db: Session, *, comment_id: UUID, page: int, limit: int) -> tuple[list[dict[str, Any]], int]:
    get_comment_or_404(db, comment_id)

    conditions = (Comment.parent_id == comment_id, Comment.is_deleted.is_(False))
    total = db.scalar(select(func.count(Comment.id)).where(*conditions)) or 0
    stmt = (
        select(Comment)
        .where(*conditions)
        .options(selectinload(Comment.author))
        .order_by(Comment.created_at.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    replies = list(db.scalars(stmt))
    likes = _comment_likes(db, (reply.id for reply in replies))
    return [_to_record(reply, likes) for reply in replies], int(total)


__all__ = [
    "get_comment_or_404",
    "comment_record",
    "list_post_comments",
    "create_comment",
    "update_comment",
    "delete_comment",
    "toggle_comment_like",
    "list_comment_replies",
]

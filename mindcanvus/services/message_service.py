"""Direct messaging between friends."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, case, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Message, User
from .friendship_service import require_friendship
from .user_service import get_user_or_404

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


def _between(user_id: UUID, other_id: UUID):
    return or_(
        and_(Message.sender_id == user_id, Message.recipient_id == other_id),
        and_(Message.sender_id == other_id, Message.recipient_id == user_id),
    )


def send_message(db: Session, *, sender: User, recipient_id: UUID, content: str) -> Message:
    """Persist a message; the recipient must be in the sender's friends list."""

    require_friendship(db, user=sender, friend_id=recipient_id)

    text = (content or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message content is required")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is too long")

    message = Message(sender_id=sender.id, recipient_id=recipient_id, content=text)
    try:
        db.add(message)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to send message") from exc

    db.refresh(message)
    return message


def list_conversations(db: Session, *, user: User) -> list[dict[str, Any]]:
    """One entry per counterpart with the last message and unread count, newest first."""

    user_id = cast(UUID, user.id)
    involved = select(
        case((Message.recipient_id == user_id, Message.sender_id), else_=Message.recipient_id).label("counterpart_id"),
        Message.created_at.label("created_at"),
        case((and_(Message.recipient_id == user_id, Message.is_read.is_(False)), 1), else_=0).label("unread"),
    ).where(or_(Message.sender_id == user_id, Message.recipient_id == user_id)).subquery()

    last_at = func.max(involved.c.created_at).label("last_at")
    grouped = (
        select(involved.c.counterpart_id, last_at, func.sum(involved.c.unread).label("unread_count"))
        .group_by(involved.c.counterpart_id)
        .order_by(last_at.desc())
    )
    rows = db.execute(grouped).all()
    if not rows:
        return []

    counterpart_ids = [row.counterpart_id for row in rows]
    users = {member.id: member for member in db.scalars(select(User).where(User.id.in_(counterpart_ids)))}

    conversations: list[dict[str, Any]] = []
    for row in rows:
        counterpart = users.get(row.counterpart_id)
        if counterpart is None:
            continue
        last_message = db.scalar(
            select(Message)
            .where(_between(user_id, row.counterpart_id))
            .order_by(Message.created_at.desc())
            .limit(1)
        )
        if last_message is None:
            continue
        conversations.append(
            {
                "user": counterpart,
                "last_message": last_message,
                "unread_count": int(row.unread_count or 0),
            }
        )
    return conversations


def get_conversation(
    db: Session,
    *,
    user: User,
    other_id: UUID,
    page: int,
    limit: int,
) -> tuple[list[Message], int]:
    """Messages between ``user`` and ``other_id``, newest first.

    Unread messages addressed to ``user`` on the returned page are marked read.
    """

    user_id = cast(UUID, user.id)
    get_user_or_404(db, other_id)

    condition = _between(user_id, other_id)
    total = db.scalar(select(func.count(Message.id)).where(condition)) or 0
    stmt = (
        select(Message)
        .where(condition)
        .order_by(Message.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    messages = list(db.scalars(stmt))

    unread = [m for m in messages if m.recipient_id == user_id and not m.is_read]
    if unread:
        now = datetime.now(timezone.utc)
        for message in unread:
            message.is_read = True
            message.read_at = now
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to mark messages read") from exc

    return messages, int(total)


def mark_conversation_read(db: Session, *, user: User, other_id: UUID) -> int:
    """Mark every unread message from ``other_id`` to ``user`` as read."""

    user_id = cast(UUID, user.id)
    stmt = (
        update(Message)
        .where(
            Message.sender_id == other_id,
            Message.recipient_id == user_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=datetime.now(timezone.utc))
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to mark messages read") from exc

    count = int(result.rowcount or 0)
    if count:
        logger.debug("Marked %d messages from %s to %s as read", count, other_id, user_id)
    return count


def count_unread(db: Session, *, user: User) -> int:
    stmt = select(func.count(Message.id)).where(Message.recipient_id == user.id, Message.is_read.is_(False))
    return int(db.scalar(stmt) or 0)


__all__ = [
    "send_message",
    "list_conversations",
    "get_conversation",
    "mark_conversation_read",
    "count_unread",
]

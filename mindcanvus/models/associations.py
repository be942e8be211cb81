"""Association tables shared across ORM models."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.sql import func

from mindcanvus.database import Base
from .base import utcnow


# Directed friend edges: a row (A, B) means B is in A's friends. Accepted
# requests always write both directions.
user_friends = Table(
    "user_friends",
    Base.metadata,
    Column("user_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("friend_id", Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False),
)


__all__ = ["user_friends"]

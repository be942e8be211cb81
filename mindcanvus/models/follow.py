"""SQLAlchemy ORM model for follower relationships."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mindcanvus.database import Base
from .base import utcnow


class Follow(Base):
    __tablename__ = "follows"

    follower_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    following_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    follower = relationship("User", foreign_keys=[follower_id], back_populates="following_relations")
    following = relationship("User", foreign_keys=[following_id], back_populates="follower_relations")


__all__ = ["Follow"]

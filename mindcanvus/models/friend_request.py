"""ORM model representing pending friend invitations between users."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mindcanvus.constants import FRIEND_REQUEST_STATUSES
from mindcanvus.database import Base
from .base import utcnow


class FriendRequest(Base):
    __tablename__ = "friend_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sender_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(Enum(*FRIEND_REQUEST_STATUSES, name="friend_request_status"), nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="friend_requests_sent")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="friend_requests_received")

    __table_args__ = (UniqueConstraint("sender_id", "recipient_id", name="uq_friend_request_pair"),)


__all__ = ["FriendRequest"]

"""SQLAlchemy ORM model for blog posts."""
from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression, func

from mindcanvus.constants import POST_CATEGORIES, POST_STATUSES
from mindcanvus.database import Base
from .base import TimestampMixin, utcnow


class Post(TimestampMixin, Base):
    __tablename__ = "posts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(300), nullable=True)
    category = Column(Enum(*POST_CATEGORIES, name="post_category"), nullable=False)
    status = Column(Enum(*POST_STATUSES, name="post_status"), nullable=False, default="draft", index=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=True, index=True)
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)
    views = Column(Integer, nullable=False, default=0, server_default="0")
    tags = Column(JSON, nullable=False, default=list)
    featured_image = Column(String(1024), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True, server_default=expression.true())
    allow_comments = Column(Boolean, nullable=False, default=True, server_default=expression.true())

    author = relationship("User", back_populates="posts")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")


class PostLike(Base):
    __tablename__ = "post_likes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    post_id = Column(Uuid(as_uuid=True), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    post = relationship("Post", back_populates="likes")
    user = relationship("User")

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)


__all__ = ["Post", "PostLike"]

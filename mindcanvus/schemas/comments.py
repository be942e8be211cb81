"""Schemas for threaded post comments."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .common import Pagination
from .posts import PostResponse
from .users import UserSummary


class CommentCreate(BaseModel):
    post_id: UUID
    content: str = Field(..., min_length=1, max_length=1000)
    parent_id: UUID | None = None


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(BaseModel):
    id: UUID
    post_id: UUID
    author: UserSummary
    content: str
    parent_id: UUID | None = None
    likes_count: int = 0
    is_edited: bool = False
    edited_at: datetime | None = None
    is_deleted: bool = False
    created_at: datetime
    replies: list["CommentResponse"] = Field(default_factory=list)


class CommentListResponse(BaseModel):
    comments: list[CommentResponse]
    pagination: Pagination


class ReplyListResponse(BaseModel):
    replies: list[CommentResponse]
    pagination: Pagination


class CommentLikeResponse(BaseModel):
    comment_id: UUID
    is_liked: bool
    likes_count: int


class PostDetailResponse(BaseModel):
    post: PostResponse
    comments: list[CommentResponse]

CommentResponse.model_rebuild()
PostDetailResponse.model_rebuild()


__all__ = [
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentListResponse",
    "ReplyListResponse",
    "CommentLikeResponse",
    "PostDetailResponse",
]

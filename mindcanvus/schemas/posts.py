"""Pydantic schemas for blog post resources."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import Pagination
from .users import UserSummary

PostCategory = Literal[
    "Entertainment",
    "Education",
    "Fun",
    "Movies",
    "Technology",
    "Lifestyle",
    "Travel",
    "Food",
    "Sports",
    "Other",
]
PostStatus = Literal["draft", "published", "scheduled"]


def _clean_tags(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    cleaned: list[str] = []
    for tag in value:
        text = (tag or "").strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


class PostCreate(BaseModel):
    """Payload used by API clients when composing a post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10000)
    excerpt: str | None = Field(default=None, max_length=300)
    category: PostCategory
    tags: list[str] = Field(default_factory=list)
    featured_image: str | None = Field(default=None, max_length=1024)
    status: PostStatus = "draft"
    scheduled_for: datetime | None = None
    is_public: bool = True
    allow_comments: bool = True

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)


class PostUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    content: str | None = Field(default=None, min_length=1, max_length=10000)
    excerpt: str | None = Field(default=None, max_length=300)
    category: PostCategory | None = None
    tags: list[str] | None = None
    featured_image: str | None = Field(default=None, max_length=1024)
    status: PostStatus | None = None
    scheduled_for: datetime | None = None
    is_public: bool | None = None
    allow_comments: bool | None = None

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: list[str] | None) -> list[str] | None:
        return _clean_tags(value)


class PostResponse(BaseModel):
    """Serialized representation of a persisted post."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author: UserSummary
    title: str
    content: str
    excerpt: str | None = None
    category: str
    tags: list[str] = Field(default_factory=list)
    featured_image: str | None = None
    status: str
    scheduled_for: datetime | None = None
    published_at: datetime | None = None
    views: int = 0
    is_public: bool = True
    allow_comments: bool = True
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    pagination: Pagination


class PostLikeResponse(BaseModel):
    post_id: UUID
    is_liked: bool
    likes_count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class CategoryListResponse(BaseModel):
    categories: list[CategoryCount]


class PostShareResponse(BaseModel):
    share_url: str
    post_id: UUID
    title: str
    excerpt: str | None = None
    author: UserSummary


__all__ = [
    "PostCategory",
    "PostStatus",
    "PostCreate",
    "PostUpdate",
    "PostResponse",
    "PostListResponse",
    "PostLikeResponse",
    "CategoryCount",
    "CategoryListResponse",
    "PostShareResponse",
]

"""Schemas for user directory and profile endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from .common import Pagination


class UserSummary(BaseModel):
    """Compact user card embedded in other payloads."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


class RankedUserSummary(UserSummary):
    followers_count: int = 0


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    role: str | None = None
    created_at: datetime
    last_active_at: datetime | None = None


class PublicProfileResponse(BaseModel):
    id: UUID
    username: str
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    followers_count: int
    following_count: int
    friends_count: int
    posts_count: int


class UserListResponse(BaseModel):
    users: list[RankedUserSummary]
    pagination: Pagination


class UserSuggestionsResponse(BaseModel):
    suggestions: list[RankedUserSummary]


__all__ = [
    "UserSummary",
    "RankedUserSummary",
    "ProfileResponse",
    "PublicProfileResponse",
    "UserListResponse",
    "UserSuggestionsResponse",
]

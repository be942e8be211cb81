"""Schemas for friend requests and friend listings."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination
from .users import RankedUserSummary, UserSummary


class FriendRequestEntry(BaseModel):
    """A pending request as seen on the recipient's record."""

    model_config = ConfigDict(populate_by_name=True)

    sender: UserSummary = Field(..., alias="from")
    status: Literal["pending", "accepted", "rejected"]
    created_at: datetime


class FriendListResponse(BaseModel):
    friends: list[UserSummary]
    pagination: Pagination


class FriendRequestListResponse(BaseModel):
    requests: list[FriendRequestEntry]
    pagination: Pagination


class SentRequestListResponse(BaseModel):
    sent_requests: list[UserSummary]
    pagination: Pagination


class FriendSuggestionResponse(BaseModel):
    suggestions: list[RankedUserSummary]
    pagination: Pagination


__all__ = [
    "FriendRequestEntry",
    "FriendListResponse",
    "FriendRequestListResponse",
    "SentRequestListResponse",
    "FriendSuggestionResponse",
]

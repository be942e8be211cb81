"""Schemas used by messaging endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .common import Pagination
from .users import UserSummary


class MessageSendRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    recipient_id: UUID
    content: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class ConversationSummary(BaseModel):
    user: UserSummary
    last_message: MessageResponse
    unread_count: int


class ConversationListResponse(BaseModel):
    conversations: List[ConversationSummary]


class MessageThreadResponse(BaseModel):
    messages: List[MessageResponse]
    pagination: Pagination


class MarkReadResponse(BaseModel):
    success: bool = True
    count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


__all__ = [
    "MessageSendRequest",
    "MessageResponse",
    "ConversationSummary",
    "ConversationListResponse",
    "MessageThreadResponse",
    "MarkReadResponse",
    "UnreadCountResponse",
]

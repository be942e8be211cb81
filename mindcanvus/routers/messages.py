"""Direct message API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ConversationListResponse,
    ConversationSummary,
    MarkReadResponse,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    Pagination,
    UnreadCountResponse,
    UserSummary,
)
from ..services import get_current_user
from ..services.message_service import (
    count_unread,
    get_conversation,
    list_conversations,
    mark_conversation_read,
    send_message,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=ConversationListResponse)
async def conversations_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationListResponse:
    entries = list_conversations(db, user=current_user)
    return ConversationListResponse(
        conversations=[
            ConversationSummary(
                user=UserSummary.model_validate(entry["user"]),
                last_message=MessageResponse.model_validate(entry["last_message"]),
                unread_count=entry["unread_count"],
            )
            for entry in entries
        ]
    )


@router.get("/unread/count", response_model=UnreadCountResponse)
async def unread_count_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UnreadCountResponse:
    return UnreadCountResponse(unread_count=count_unread(db, user=current_user))


@router.get("/{user_id}", response_model=MessageThreadResponse)
async def conversation_endpoint(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageThreadResponse:
    messages, total = get_conversation(db, user=current_user, other_id=user_id, page=page, limit=limit)
    return MessageThreadResponse(
        messages=[MessageResponse.model_validate(message) for message in messages],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("/{user_id}", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message_endpoint(
    user_id: UUID,
    payload: MessageSendRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    message = send_message(db, sender=current_user, recipient_id=user_id, content=payload.content)
    return MessageResponse.model_validate(message)


@router.put("/{user_id}/read", response_model=MarkReadResponse)
async def mark_read_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MarkReadResponse:
    return MarkReadResponse(count=mark_conversation_read(db, user=current_user, other_id=user_id))


__all__ = ["router"]

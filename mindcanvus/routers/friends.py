"""Friend management API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ActionResponse,
    FriendListResponse,
    FriendRequestEntry,
    FriendRequestListResponse,
    FriendSuggestionResponse,
    Pagination,
    RankedUserSummary,
    SentRequestListResponse,
    UserSummary,
)
from ..services import get_current_user
from ..services.friendship_service import (
    accept_friend_request,
    cancel_friend_request,
    list_friend_suggestions,
    list_friends,
    list_incoming_requests,
    list_sent_requests,
    reject_friend_request,
    remove_friend,
    send_friend_request,
)

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("", response_model=FriendListResponse)
async def friends_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendListResponse:
    friends, total = list_friends(db, user=current_user, page=page, limit=limit)
    return FriendListResponse(
        friends=[UserSummary.model_validate(friend) for friend in friends],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/requests", response_model=FriendRequestListResponse)
async def incoming_requests_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendRequestListResponse:
    requests, total = list_incoming_requests(db, user=current_user, page=page, limit=limit)
    return FriendRequestListResponse(
        requests=[
            FriendRequestEntry(
                sender=UserSummary.model_validate(item.sender),
                status=item.status,
                created_at=item.created_at,
            )
            for item in requests
        ],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/requests/sent", response_model=SentRequestListResponse)
async def sent_requests_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SentRequestListResponse:
    recipients, total = list_sent_requests(db, user=current_user, page=page, limit=limit)
    return SentRequestListResponse(
        sent_requests=[UserSummary.model_validate(user) for user in recipients],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/suggestions", response_model=FriendSuggestionResponse)
async def suggestions_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendSuggestionResponse:
    rows, total = list_friend_suggestions(db, user=current_user, page=page, limit=limit)
    return FriendSuggestionResponse(
        suggestions=[
            RankedUserSummary(**UserSummary.model_validate(user).model_dump(), followers_count=count)
            for user, count in rows
        ],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("/request/{user_id}", response_model=ActionResponse, status_code=status.HTTP_201_CREATED)
async def send_request_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    send_friend_request(db, requester=current_user, target_id=user_id)
    return ActionResponse(message="Friend request sent")


@router.delete("/request/{user_id}", response_model=ActionResponse)
async def cancel_request_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    cancel_friend_request(db, requester=current_user, target_id=user_id)
    return ActionResponse(message="Friend request cancelled")


@router.put("/accept/{user_id}", response_model=ActionResponse)
async def accept_request_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    accept_friend_request(db, accepter=current_user, requester_id=user_id)
    return ActionResponse(message="Friend request accepted")


@router.put("/reject/{user_id}", response_model=ActionResponse)
async def reject_request_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    reject_friend_request(db, accepter=current_user, requester_id=user_id)
    return ActionResponse(message="Friend request rejected")


@router.delete("/{user_id}", response_model=ActionResponse)
async def remove_friend_endpoint(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    remove_friend(db, user=current_user, friend_id=user_id)
    return ActionResponse(message="Friend removed")


__all__ = ["router"]

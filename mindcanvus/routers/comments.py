"""Comment API routes."""
from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    ActionResponse,
    CommentCreate,
    CommentLikeResponse,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
    Pagination,
    ReplyListResponse,
)
from ..services import get_current_user
from ..services.comment_service import (
    comment_record,
    create_comment,
    delete_comment,
    list_comment_replies,
    list_post_comments,
    toggle_comment_like,
    update_comment,
)

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/post/{post_id}", response_model=CommentListResponse)
async def post_comments_endpoint(
    post_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sort: Literal["newest", "oldest"] = Query("newest"),
    db: Session = Depends(get_session),
) -> CommentListResponse:
    records, total = list_post_comments(db, post_id=post_id, page=page, limit=limit, sort=sort)
    return CommentListResponse(
        comments=[CommentResponse(**record) for record in records],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment_endpoint(
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> CommentResponse:
    comment = create_comment(db, author=current_user, payload=payload)
    return CommentResponse(**comment_record(db, comment))


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment_endpoint(
    comment_id: UUID,
    payload: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> CommentResponse:
    comment = update_comment(db, comment_id=comment_id, requester=current_user, content=payload.content)
    return CommentResponse(**comment_record(db, comment))


@router.delete("/{comment_id}", response_model=ActionResponse)
async def delete_comment_endpoint(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    delete_comment(db, comment_id=comment_id, requester=current_user)
    return ActionResponse(message="Comment deleted")


@router.post("/{comment_id}/like", response_model=CommentLikeResponse)
async def like_comment_endpoint(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> CommentLikeResponse:
    return CommentLikeResponse(**toggle_comment_like(db, comment_id=comment_id, user_id=current_user.id))


@router.get("/{comment_id}/replies", response_model=ReplyListResponse)
async def replies_endpoint(
    comment_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_session),
) -> ReplyListResponse:
    records, total = list_comment_replies(db, comment_id=comment_id, page=page, limit=limit)
    return ReplyListResponse(
        replies=[CommentResponse(**record) for record in records],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


__all__ = ["router"]

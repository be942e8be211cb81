"""Post related API routes."""
from __future__ import annotations

import logging
from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import POST_DETAIL_COMMENT_LIMIT
from ..database import get_session
from ..models import User
from ..schemas import (
    ActionResponse,
    CategoryCount,
    CategoryListResponse,
    CommentResponse,
    Pagination,
    PostCategory,
    PostCreate,
    PostDetailResponse,
    PostLikeResponse,
    PostListResponse,
    PostResponse,
    PostShareResponse,
    PostUpdate,
    UserSummary,
)
from ..services import get_current_user, get_optional_user
from ..services.comment_service import list_post_comments
from ..services.post_service import (
    category_counts,
    create_post,
    delete_post,
    get_post_record,
    increment_post_views,
    list_posts,
    list_user_posts,
    toggle_post_like,
    update_post,
)

router = APIRouter(prefix="/posts", tags=["posts"])

logger = logging.getLogger(__name__)


def _viewer_id(user: User | None) -> UUID | None:
    return user.id if user is not None else None


@router.get("", response_model=PostListResponse)
async def list_posts_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[PostCategory] = Query(None),
    author: UUID | None = Query(None),
    search: str | None = Query(None, max_length=200),
    sort: Literal["latest", "oldest", "popular", "views"] = Query("latest"),
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> PostListResponse:
    records, total = list_posts(
        db,
        page=page,
        limit=limit,
        category=category,
        author_id=author,
        search=search,
        sort=sort,
        viewer_id=_viewer_id(viewer),
    )
    return PostListResponse(
        posts=[PostResponse(**record) for record in records],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/categories", response_model=CategoryListResponse)
async def categories_endpoint(db: Session = Depends(get_session)) -> CategoryListResponse:
    return CategoryListResponse(categories=[CategoryCount(**row) for row in category_counts(db)])


@router.get("/user/{user_id}", response_model=PostListResponse)
async def user_posts_endpoint(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    post_status: Literal["published", "draft", "scheduled", "all"] = Query("published", alias="status"),
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> PostListResponse:
    records, total = list_user_posts(
        db,
        author_id=user_id,
        post_status=post_status,
        viewer=viewer,
        page=page,
        limit=limit,
    )
    return PostListResponse(
        posts=[PostResponse(**record) for record in records],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{post_id}", response_model=PostDetailResponse)
async def get_post_endpoint(
    post_id: UUID,
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_session),
) -> PostDetailResponse:
    record = get_post_record(db, post_id=post_id, viewer_id=_viewer_id(viewer))
    increment_post_views(db, post_id=post_id)
    record["views"] += 1
    comments, _ = list_post_comments(db, post_id=post_id, page=1, limit=POST_DETAIL_COMMENT_LIMIT)
    return PostDetailResponse(
        post=PostResponse(**record),
        comments=[CommentResponse(**comment) for comment in comments],
    )


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    payload: PostCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PostResponse:
    post = create_post(db, author=current_user, payload=payload)
    return PostResponse(**get_post_record(db, post_id=post.id, viewer_id=current_user.id))


@router.put("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: UUID,
    payload: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PostResponse:
    update_post(db, post_id=post_id, requester=current_user, payload=payload)
    return PostResponse(**get_post_record(db, post_id=post_id, viewer_id=current_user.id))


@router.delete("/{post_id}", response_model=ActionResponse)
async def delete_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ActionResponse:
    delete_post(db, post_id=post_id, requester=current_user)
    return ActionResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=PostLikeResponse)
async def like_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PostLikeResponse:
    return PostLikeResponse(**toggle_post_like(db, post_id=post_id, user_id=current_user.id))


@router.post("/{post_id}/share", response_model=PostShareResponse)
async def share_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PostShareResponse:
    record = get_post_record(db, post_id=post_id, viewer_id=current_user.id)
    base_url = get_settings().public_base_url.rstrip("/")
    logger.info("User %s shared post %s", current_user.id, post_id)
    return PostShareResponse(
        share_url=f"{base_url}/posts/{post_id}",
        post_id=post_id,
        title=record["title"],
        excerpt=record["excerpt"],
        author=UserSummary.model_validate(record["author"]),
    )


__all__ = ["router"]

"""User directory, profile and follow API routes."""
from __future__ import annotations

from dataclasses import asdict
from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    FollowActionResponse,
    FollowListResponse,
    FollowStatsResponse,
    Pagination,
    PublicProfileResponse,
    RankedUserSummary,
    UserListResponse,
    UserSuggestionsResponse,
    UserSummary,
)
from ..services import get_current_user, get_optional_user
from ..services.follow_service import (
    follow_user,
    get_follow_stats,
    list_followers,
    list_following,
    unfollow_user,
)
from ..services.user_service import follow_suggestions, get_profile, search_users

router = APIRouter(prefix="/users", tags=["users"])


def _ranked(user: User, followers_count: int) -> RankedUserSummary:
    return RankedUserSummary(**UserSummary.model_validate(user).model_dump(), followers_count=followers_count)


@router.get("/search", response_model=UserListResponse)
async def search_users_endpoint(
    q: str = Query("", max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_session),
) -> UserListResponse:
    rows, total = search_users(db, query=q, page=page, limit=limit)
    return UserListResponse(
        users=[_ranked(user, count) for user, count in rows],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/suggestions", response_model=UserSuggestionsResponse)
async def suggestions_endpoint(
    limit: int = Query(10, ge=1, le=50),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> UserSuggestionsResponse:
    rows = follow_suggestions(db, user=current_user, limit=limit)
    return UserSuggestionsResponse(suggestions=[_ranked(user, count) for user, count in rows])


@router.get("/{username}", response_model=PublicProfileResponse)
async def profile_endpoint(username: str, db: Session = Depends(get_session)) -> PublicProfileResponse:
    stats = get_profile(db, username=username)
    user = stats.user
    return PublicProfileResponse(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        bio=user.bio,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        followers_count=stats.followers_count,
        following_count=stats.following_count,
        friends_count=stats.friends_count,
        posts_count=stats.posts_count,
    )


@router.post("/{user_id}/follow", response_model=FollowActionResponse, status_code=status.HTTP_201_CREATED)
async def follow_user_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    viewer_id = cast(UUID, current_user.id)
    follow_user(db, follower=current_user, target_id=user_id)
    stats = get_follow_stats(db, user_id=user_id, viewer_id=viewer_id)
    return FollowActionResponse(**asdict(stats), status="followed")


@router.delete("/{user_id}/follow", response_model=FollowActionResponse)
async def unfollow_user_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> FollowActionResponse:
    viewer_id = cast(UUID, current_user.id)
    unfollow_user(db, follower=current_user, target_id=user_id)
    stats = get_follow_stats(db, user_id=user_id, viewer_id=viewer_id)
    return FollowActionResponse(**asdict(stats), status="unfollowed")


@router.get("/{user_id}/follow-stats", response_model=FollowStatsResponse)
async def follow_stats_endpoint(
    user_id: UUID,
    db: Session = Depends(get_session),
    viewer: User | None = Depends(get_optional_user),
) -> FollowStatsResponse:
    viewer_id = cast(UUID, viewer.id) if viewer is not None else None
    return FollowStatsResponse(**asdict(get_follow_stats(db, user_id=user_id, viewer_id=viewer_id)))


@router.get("/{user_id}/followers", response_model=FollowListResponse)
async def followers_endpoint(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_session),
) -> FollowListResponse:
    users, total = list_followers(db, user_id=user_id, page=page, limit=limit)
    return FollowListResponse(
        users=[UserSummary.model_validate(user) for user in users],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{user_id}/following", response_model=FollowListResponse)
async def following_endpoint(
    user_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_session),
) -> FollowListResponse:
    users, total = list_following(db, user_id=user_id, page=page, limit=limit)
    return FollowListResponse(
        users=[UserSummary.model_validate(user) for user in users],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


__all__ = ["router"]

"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest
from .comments import (
    CommentCreate,
    CommentLikeResponse,
    CommentListResponse,
    CommentResponse,
    CommentUpdate,
    PostDetailResponse,
    ReplyListResponse,
)
from .common import ActionResponse, Pagination
from .follow import FollowActionResponse, FollowListResponse, FollowStatsResponse
from .friends import (
    FriendListResponse,
    FriendRequestEntry,
    FriendRequestListResponse,
    FriendSuggestionResponse,
    SentRequestListResponse,
)
from .messages import (
    ConversationListResponse,
    ConversationSummary,
    MarkReadResponse,
    MessageResponse,
    MessageSendRequest,
    MessageThreadResponse,
    UnreadCountResponse,
)
from .posts import (
    CategoryCount,
    CategoryListResponse,
    PostCategory,
    PostCreate,
    PostLikeResponse,
    PostListResponse,
    PostResponse,
    PostShareResponse,
    PostUpdate,
)
from .users import (
    ProfileResponse,
    PublicProfileResponse,
    RankedUserSummary,
    UserListResponse,
    UserSuggestionsResponse,
    UserSummary,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "ActionResponse",
    "Pagination",
    "CommentCreate",
    "CommentUpdate",
    "CommentResponse",
    "CommentListResponse",
    "CommentLikeResponse",
    "ReplyListResponse",
    "PostDetailResponse",
    "FollowActionResponse",
    "FollowListResponse",
    "FollowStatsResponse",
    "FriendListResponse",
    "FriendRequestEntry",
    "FriendRequestListResponse",
    "FriendSuggestionResponse",
    "SentRequestListResponse",
    "ConversationListResponse",
    "ConversationSummary",
    "MarkReadResponse",
    "MessageResponse",
    "MessageSendRequest",
    "MessageThreadResponse",
    "UnreadCountResponse",
    "CategoryCount",
    "CategoryListResponse",
    "PostCategory",
    "PostCreate",
    "PostLikeResponse",
    "PostListResponse",
    "PostResponse",
    "PostShareResponse",
    "PostUpdate",
    "ProfileResponse",
    "PublicProfileResponse",
    "RankedUserSummary",
    "UserListResponse",
    "UserSuggestionsResponse",
    "UserSummary",
]

"""Project-wide constant values."""
from __future__ import annotations

POST_CATEGORIES: tuple[str, ...] = (
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
)

POST_STATUSES: tuple[str, ...] = ("draft", "published", "scheduled")

POST_SORTS: tuple[str, ...] = ("latest", "oldest", "popular", "views")

FRIEND_REQUEST_STATUSES: tuple[str, ...] = ("pending", "accepted", "rejected")

USER_ROLES: tuple[str, ...] = ("user", "admin")

DELETED_COMMENT_PLACEHOLDER = "[Comment deleted]"

EXCERPT_LENGTH = 150

POST_DETAIL_COMMENT_LIMIT = 20

__all__ = [
    "POST_CATEGORIES",
    "POST_STATUSES",
    "POST_SORTS",
    "FRIEND_REQUEST_STATUSES",
    "USER_ROLES",
    "DELETED_COMMENT_PLACEHOLDER",
    "EXCERPT_LENGTH",
    "POST_DETAIL_COMMENT_LIMIT",
]

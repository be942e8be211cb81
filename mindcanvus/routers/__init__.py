"""Aggregate router exports."""
from .auth import router as auth_router
from .comments import router as comments_router
from .friends import router as friends_router
from .messages import router as messages_router
from .posts import router as posts_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "comments_router",
    "friends_router",
    "messages_router",
    "posts_router",
    "users_router",
]

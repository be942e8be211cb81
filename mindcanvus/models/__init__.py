"""Convenience exports for ORM models."""
from .associations import user_friends
from .comment import Comment, CommentLike
from .follow import Follow
from .friend_request import FriendRequest
from .message import Message
from .post import Post, PostLike
from .user import User

__all__ = [
    "user_friends",
    "Comment",
    "CommentLike",
    "Follow",
    "FriendRequest",
    "Message",
    "Post",
    "PostLike",
    "User",
]

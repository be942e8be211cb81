"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_optional_user,
    register_user,
)
from .comment_service import (
    create_comment,
    delete_comment,
    list_comment_replies,
    list_post_comments,
    toggle_comment_like,
    update_comment,
)
from .follow_service import FollowStats, follow_user, get_follow_stats, unfollow_user
from .friendship_service import (
    accept_friend_request,
    cancel_friend_request,
    list_friends,
    reject_friend_request,
    remove_friend,
    require_friendship,
    send_friend_request,
)
from .message_service import count_unread, get_conversation, list_conversations, mark_conversation_read, send_message
from .post_service import (
    category_counts,
    create_post,
    delete_post,
    get_post_record,
    list_posts,
    toggle_post_like,
    update_post,
)
from .publisher_service import PublishSummary, ScheduledPublisher, publish_due_posts, run_publisher
from .user_service import ProfileStats, get_profile, search_users

__all__ = [
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "register_user",
    "create_comment",
    "delete_comment",
    "list_comment_replies",
    "list_post_comments",
    "toggle_comment_like",
    "update_comment",
    "FollowStats",
    "follow_user",
    "get_follow_stats",
    "unfollow_user",
    "accept_friend_request",
    "cancel_friend_request",
    "list_friends",
    "reject_friend_request",
    "remove_friend",
    "require_friendship",
    "send_friend_request",
    "count_unread",
    "get_conversation",
    "list_conversations",
    "mark_conversation_read",
    "send_message",
    "category_counts",
    "create_post",
    "delete_post",
    "get_post_record",
    "list_posts",
    "toggle_post_like",
    "update_post",
    "PublishSummary",
    "ScheduledPublisher",
    "publish_due_posts",
    "run_publisher",
    "ProfileStats",
    "get_profile",
    "search_users",
]

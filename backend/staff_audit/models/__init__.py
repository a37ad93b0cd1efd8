"""Database models package."""

from staff_audit.models.enums import (
    ADMIN_ONLY_ACTION_IDS,
    STAFF_ACTION_IDS,
    STAFF_ACTIONS,
    UserHistoryAction,
    is_json_value_pair,
)
from staff_audit.models.post import Post
from staff_audit.models.topic import Topic
from staff_audit.models.user import User
from staff_audit.models.user_history import UserHistory

__all__ = [
    "User",
    "Topic",
    "Post",
    "UserHistory",
    "UserHistoryAction",
    "STAFF_ACTIONS",
    "STAFF_ACTION_IDS",
    "ADMIN_ONLY_ACTION_IDS",
    "is_json_value_pair",
]

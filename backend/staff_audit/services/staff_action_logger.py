"""Helpers that write staff actions to the user history table.

The session is flushed so callers get the record id back; committing stays
with the caller.
"""

import json
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from staff_audit.errors import UserHistoryValidationError
from staff_audit.logging_config import get_logger
from staff_audit.models.enums import UserHistoryAction
from staff_audit.models.post import Post
from staff_audit.models.user import User
from staff_audit.models.user_history import UserHistory

logger = get_logger("services.staff_action_logger")

# Columns a caller may set; admin_only is always derived.
_LOGGABLE_FIELDS = frozenset(
    {
        "post_id",
        "topic_id",
        "details",
        "context",
        "ip_address",
        "email",
        "subject",
        "previous_value",
        "new_value",
        "custom_type",
        "target_user_id",
    }
)


def _require_acting_user(acting_user: Optional[User]) -> User:
    if acting_user is None:
        raise ValueError("acting_user is required to log a staff action")
    return acting_user


async def log_action(
    db: AsyncSession,
    action: Any,
    *,
    acting_user: Optional[User] = None,
    target_user: Optional[User] = None,
    **fields: Any,
) -> UserHistory:
    """Append one user history record and flush it.

    Raises:
        UserHistoryValidationError: if ``action`` is missing
        UnknownActionError: if ``action`` is not a known action kind
        TypeError: if ``fields`` names a column that cannot be logged
    """
    if action is None or (isinstance(action, str) and not action.strip()):
        raise UserHistoryValidationError("UserHistory.action can't be blank")
    unknown = set(fields) - _LOGGABLE_FIELDS
    if unknown:
        raise TypeError(f"Unsupported user history field(s): {', '.join(sorted(unknown))}")

    if target_user is not None:
        fields["target_user_id"] = target_user.id
    entry = UserHistory(
        action=action,
        acting_user_id=acting_user.id if acting_user else None,
        **fields,
    )
    db.add(entry)
    await db.flush()
    logger.info(
        "Logged %s by user %s against user %s (id=%s)",
        entry.action_kind.label,
        entry.acting_user_id,
        entry.target_user_id,
        entry.id,
    )
    return entry


async def log_site_setting_change(
    db: AsyncSession,
    acting_user: User,
    setting_name: str,
    previous_value: Any,
    new_value: Any,
) -> UserHistory:
    return await log_action(
        db,
        UserHistoryAction.CHANGE_SITE_SETTING,
        acting_user=_require_acting_user(acting_user),
        subject=setting_name,
        previous_value=None if previous_value is None else str(previous_value),
        new_value=None if new_value is None else str(new_value),
    )


async def log_site_customization_change(
    db: AsyncSession,
    acting_user: User,
    customization: dict[str, Any],
    previous: Optional[dict[str, Any]] = None,
) -> UserHistory:
    """Record a site customization save; values are stored as JSON text."""
    return await log_action(
        db,
        UserHistoryAction.CHANGE_SITE_CUSTOMIZATION,
        acting_user=_require_acting_user(acting_user),
        subject=customization.get("name"),
        previous_value=None if previous is None else json.dumps(previous),
        new_value=json.dumps(customization),
    )


async def log_site_customization_destroy(
    db: AsyncSession,
    acting_user: User,
    customization: dict[str, Any],
) -> UserHistory:
    return await log_action(
        db,
        UserHistoryAction.DELETE_SITE_CUSTOMIZATION,
        acting_user=_require_acting_user(acting_user),
        subject=customization.get("name"),
        previous_value=json.dumps(customization),
    )


async def log_user_suspend(
    db: AsyncSession,
    acting_user: User,
    target_user: User,
    reason: str,
) -> UserHistory:
    return await log_action(
        db,
        UserHistoryAction.SUSPEND_USER,
        acting_user=_require_acting_user(acting_user),
        target_user=target_user,
        details=reason,
    )


async def log_user_unsuspend(db: AsyncSession, acting_user: User, target_user: User) -> UserHistory:
    return await log_action(
        db,
        UserHistoryAction.UNSUSPEND_USER,
        acting_user=_require_acting_user(acting_user),
        target_user=target_user,
    )


async def log_post_deletion(db: AsyncSession, acting_user: User, post: Post) -> UserHistory:
    """Record a post deletion against the post's author, keeping its raw text."""
    return await log_action(
        db,
        UserHistoryAction.DELETE_POST,
        acting_user=_require_acting_user(acting_user),
        target_user_id=post.user_id,
        post_id=post.id,
        topic_id=post.topic_id,
        details=post.raw,
    )


async def log_custom(
    db: AsyncSession,
    acting_user: User,
    custom_type: str,
    details: Optional[dict[str, Any]] = None,
    *,
    staff: bool = True,
) -> UserHistory:
    """Record a plugin-defined action under ``custom_type``."""
    if not custom_type:
        raise ValueError("custom_type is required for custom actions")
    action = UserHistoryAction.CUSTOM_STAFF if staff else UserHistoryAction.CUSTOM
    return await log_action(
        db,
        action,
        acting_user=_require_acting_user(acting_user),
        custom_type=custom_type,
        details=None if details is None else json.dumps(details),
    )

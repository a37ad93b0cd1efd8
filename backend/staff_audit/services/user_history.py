"""Read-side queries over the user history table."""

import logging
from typing import Any, Mapping, Optional, Union

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from staff_audit.models.enums import STAFF_ACTION_IDS, UserHistoryAction
from staff_audit.models.user import User
from staff_audit.models.user_history import UserHistory
from staff_audit.schemas.user_history import UserHistoryFilters

logger = logging.getLogger(__name__)

STAFF_ACTION_RECORDS_LIMIT = 200

ActionKind = Union[UserHistoryAction, int, str]


def _user_ids_for(username: str) -> Select:
    return select(User.id).where(User.username_lower == username.lower())


def with_filters(filters: Optional[UserHistoryFilters] = None) -> Select:
    """Build a lazy user history query narrowed by ``filters``.

    Unset filters add no predicate. Username filters match case-insensitively
    and select nothing when no such user exists.
    """
    query = select(UserHistory)
    if filters is None:
        return query

    if filters.action_id is not None:
        query = query.where(UserHistory.action == int(filters.action_id))
    if filters.custom_type:
        query = query.where(UserHistory.custom_type == filters.custom_type)
    if filters.acting_user:
        query = query.where(UserHistory.acting_user_id.in_(_user_ids_for(filters.acting_user)))
    if filters.target_user:
        query = query.where(UserHistory.target_user_id.in_(_user_ids_for(filters.target_user)))
    if filters.subject:
        query = query.where(UserHistory.subject == filters.subject)
    return query


def only_staff_actions(query: Select) -> Select:
    """Restrict ``query`` to staff actions."""
    return query.where(UserHistory.action.in_(sorted(STAFF_ACTION_IDS)))


def records_for(user_id: int, action_kind: ActionKind) -> Select:
    """Query records of ``action_kind`` performed against ``user_id``.

    Raises:
        UnknownActionError: if ``action_kind`` is not a known action
    """
    action = UserHistoryAction.resolve(action_kind)
    return select(UserHistory).where(
        UserHistory.target_user_id == user_id,
        UserHistory.action == int(action),
    )


async def exists_for_user(
    db: AsyncSession,
    user_id: int,
    action_kind: ActionKind,
    topic_id: Optional[int] = None,
) -> bool:
    """Return True if ``user_id`` has a record of ``action_kind``, optionally within a topic."""
    query = records_for(user_id, action_kind)
    if topic_id is not None:
        query = query.where(UserHistory.topic_id == topic_id)
    result = await db.execute(select(query.exists()))
    return bool(result.scalar())


async def staff_action_records(
    db: AsyncSession,
    viewer: Optional[User],
    filters: Union[UserHistoryFilters, Mapping[str, Any], None] = None,
) -> list[UserHistory]:
    """Return the most recent staff action records visible to ``viewer``.

    Only staff filter keys are honoured when ``filters`` is a mapping.
    Admin-only records are hidden unless the viewer is an administrator.
    Acting and target users are loaded in one batch per relation.
    """
    if filters is not None and not isinstance(filters, UserHistoryFilters):
        filters = UserHistoryFilters.from_params(filters)

    query = only_staff_actions(with_filters(filters))
    if not (viewer is not None and getattr(viewer, "is_admin", False)):
        query = query.where(UserHistory.admin_only.is_(False))
    query = (
        query.order_by(UserHistory.id.desc())
        .limit(STAFF_ACTION_RECORDS_LIMIT)
        .options(selectinload(UserHistory.acting_user), selectinload(UserHistory.target_user))
    )

    result = await db.execute(query)
    records = list(result.scalars().all())
    logger.debug(
        "Loaded %s staff action record(s) for viewer %s",
        len(records),
        viewer.id if viewer is not None else None,
    )
    return records

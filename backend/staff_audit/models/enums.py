"""Action kinds recorded in the user history table.

Codes are persisted, so this enumeration is append-only: new kinds take the
next unused code and retired kinds keep theirs.
"""

from enum import IntEnum
from typing import Union

from staff_audit.errors import UnknownActionError


class UserHistoryAction(IntEnum):
    """Administrative and moderation events recorded against user accounts."""

    DELETE_USER = 1
    CHANGE_TRUST_LEVEL = 2
    CHANGE_SITE_SETTING = 3
    CHANGE_SITE_CUSTOMIZATION = 4
    DELETE_SITE_CUSTOMIZATION = 5
    CHECKED_FOR_CUSTOM_AVATAR = 6  # not used anymore
    NOTIFIED_ABOUT_AVATAR = 7
    NOTIFIED_ABOUT_SEQUENTIAL_REPLIES = 8
    NOTIFIED_ABOUT_DOMINATING_TOPIC = 9
    SUSPEND_USER = 10
    UNSUSPEND_USER = 11
    FACEBOOK_NO_EMAIL = 12
    GRANT_BADGE = 13
    REVOKE_BADGE = 14
    AUTO_TRUST_LEVEL_CHANGE = 15
    CHECK_EMAIL = 16
    DELETE_POST = 17
    DELETE_TOPIC = 18
    IMPERSONATE = 19
    ROLL_UP = 20
    CHANGE_USERNAME = 21
    CUSTOM = 22
    CUSTOM_STAFF = 23
    ANONYMIZE_USER = 24

    @property
    def label(self) -> str:
        """Lowercase symbolic name, e.g. ``delete_user``."""
        return self.name.lower()

    @classmethod
    def resolve(cls, kind: Union["UserHistoryAction", int, str]) -> "UserHistoryAction":
        """Return the member for a member, integer code (int or digit string) or name.

        Raises:
            UnknownActionError: if ``kind`` names no action
        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, bool):
            raise UnknownActionError(kind)
        if isinstance(kind, int):
            try:
                return cls(kind)
            except ValueError:
                raise UnknownActionError(kind) from None
        if isinstance(kind, str):
            name = kind.strip()
            if name.isascii() and name.isdigit():
                try:
                    return cls(int(name))
                except ValueError:
                    raise UnknownActionError(kind) from None
            try:
                return cls[name.upper()]
            except KeyError:
                raise UnknownActionError(kind) from None
        raise UnknownActionError(kind)


# Staff actions are the subset shown in staff-facing audit views.
STAFF_ACTIONS: tuple[UserHistoryAction, ...] = (
    UserHistoryAction.DELETE_USER,
    UserHistoryAction.CHANGE_TRUST_LEVEL,
    UserHistoryAction.CHANGE_SITE_SETTING,
    UserHistoryAction.CHANGE_SITE_CUSTOMIZATION,
    UserHistoryAction.DELETE_SITE_CUSTOMIZATION,
    UserHistoryAction.SUSPEND_USER,
    UserHistoryAction.UNSUSPEND_USER,
    UserHistoryAction.GRANT_BADGE,
    UserHistoryAction.REVOKE_BADGE,
    UserHistoryAction.CHECK_EMAIL,
    UserHistoryAction.DELETE_POST,
    UserHistoryAction.DELETE_TOPIC,
    UserHistoryAction.IMPERSONATE,
    UserHistoryAction.ROLL_UP,
    UserHistoryAction.CHANGE_USERNAME,
    UserHistoryAction.CUSTOM_STAFF,
    UserHistoryAction.ANONYMIZE_USER,
)

STAFF_ACTION_IDS: frozenset[int] = frozenset(int(action) for action in STAFF_ACTIONS)

# Staff actions that only administrators may see.
ADMIN_ONLY_ACTION_IDS: frozenset[int] = frozenset({int(UserHistoryAction.CHANGE_SITE_SETTING)})

# previous_value/new_value hold JSON text for these actions.
JSON_VALUE_ACTION_IDS: frozenset[int] = frozenset(
    {
        int(UserHistoryAction.CHANGE_SITE_CUSTOMIZATION),
        int(UserHistoryAction.DELETE_SITE_CUSTOMIZATION),
    }
)


def is_json_value_pair(action: Union[UserHistoryAction, int, str]) -> bool:
    """Return True when previous_value/new_value are JSON-encoded for ``action``."""
    return int(UserHistoryAction.resolve(action)) in JSON_VALUE_ACTION_IDS

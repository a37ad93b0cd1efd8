"""Exceptions raised by the user history component."""


class UserHistoryError(Exception):
    """Base class for user history errors."""


class UnknownActionError(UserHistoryError, ValueError):
    """Raised when an action kind is not part of the action enumeration."""

    def __init__(self, action) -> None:
        self.action = action
        super().__init__(f"Unknown user history action: {action!r}")


class UserHistoryValidationError(UserHistoryError, ValueError):
    """Raised when a user history record fails validation before insert."""

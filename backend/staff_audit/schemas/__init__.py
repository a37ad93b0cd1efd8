"""Pydantic schemas package."""

from staff_audit.schemas.auth import LoginRequest, TokenResponse, UserResponse
from staff_audit.schemas.user_history import (
    StaffActionLogItem,
    StaffActionLogListResponse,
    UserHistoryFilters,
)

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    "UserHistoryFilters",
    "StaffActionLogItem",
    "StaffActionLogListResponse",
]

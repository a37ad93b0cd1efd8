"""Schemas for user history filters and staff action log responses."""

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from staff_audit.models.enums import UserHistoryAction
from staff_audit.models.user_history import UserHistory

# Filter keys accepted by the staff action log view.
STAFF_FILTER_KEYS = ("action_id", "custom_type", "acting_user", "target_user", "subject")


class UserHistoryFilters(BaseModel):
    """Supported user history filters; blank values mean "no filter"."""

    model_config = ConfigDict(extra="forbid")

    action_id: Optional[UserHistoryAction] = None
    custom_type: Optional[str] = None
    acting_user: Optional[str] = None
    target_user: Optional[str] = None
    subject: Optional[str] = None

    @field_validator("custom_type", "acting_user", "target_user", "subject", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("action_id", mode="before")
    @classmethod
    def resolve_action(cls, v: Any) -> Optional[UserHistoryAction]:
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
        return UserHistoryAction.resolve(v)

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "UserHistoryFilters":
        """Build filters from arbitrary params, keeping only the supported keys."""
        return cls(**{key: params[key] for key in STAFF_FILTER_KEYS if key in params})


class StaffActionLogItem(BaseModel):
    id: int
    action: int
    action_name: str
    acting_user_id: Optional[int]
    acting_username: Optional[str]
    target_user_id: Optional[int]
    target_username: Optional[str]
    post_id: Optional[int]
    topic_id: Optional[int]
    details: Optional[str]
    context: Optional[str]
    ip_address: Optional[str]
    email: Optional[str]
    subject: Optional[str]
    previous_value: Optional[str]
    new_value: Optional[str]
    custom_type: Optional[str]
    admin_only: bool
    created_at: datetime

    @classmethod
    def from_record(cls, record: UserHistory) -> "StaffActionLogItem":
        return cls(
            id=record.id,
            action=record.action,
            action_name=record.action_kind.label,
            acting_user_id=record.acting_user_id,
            acting_username=record.acting_user.username if record.acting_user else None,
            target_user_id=record.target_user_id,
            target_username=record.target_user.username if record.target_user else None,
            post_id=record.post_id,
            topic_id=record.topic_id,
            details=record.details,
            context=record.context,
            ip_address=record.ip_address,
            email=record.email,
            subject=record.subject,
            previous_value=record.previous_value,
            new_value=record.new_value,
            custom_type=record.custom_type,
            admin_only=record.admin_only,
            created_at=record.created_at,
        )


class StaffActionLogListResponse(BaseModel):
    staff_action_logs: list[StaffActionLogItem]


class StaffActionKind(BaseModel):
    id: int
    name: str


class StaffActionKindsResponse(BaseModel):
    actions: list[StaffActionKind]

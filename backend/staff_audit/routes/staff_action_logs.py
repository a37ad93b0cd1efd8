"""Staff action log routes."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from staff_audit.database import get_db
from staff_audit.models.enums import STAFF_ACTIONS
from staff_audit.models.user import User
from staff_audit.routes.auth import get_current_user
from staff_audit.schemas.user_history import (
    StaffActionKind,
    StaffActionKindsResponse,
    StaffActionLogItem,
    StaffActionLogListResponse,
    UserHistoryFilters,
)
from staff_audit.services.user_history import staff_action_records

router = APIRouter(prefix="/admin/logs", tags=["staff-action-logs"])


def _require_staff(user: User) -> None:
    if not user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff privileges required",
        )


@router.get("/staff-action-logs", response_model=StaffActionLogListResponse)
async def list_staff_action_logs(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List recent staff actions; query params other than the supported filters are ignored."""
    _require_staff(current_user)

    try:
        filters = UserHistoryFilters.from_params(request.query_params)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    records = await staff_action_records(db, current_user, filters)
    return StaffActionLogListResponse(
        staff_action_logs=[StaffActionLogItem.from_record(record) for record in records]
    )


@router.get("/staff-action-logs/actions", response_model=StaffActionKindsResponse)
async def list_staff_action_kinds(current_user: User = Depends(get_current_user)):
    """List the staff action kinds usable as the ``action_id`` filter."""
    _require_staff(current_user)
    return StaffActionKindsResponse(
        actions=[StaffActionKind(id=int(action), name=action.label) for action in STAFF_ACTIONS]
    )

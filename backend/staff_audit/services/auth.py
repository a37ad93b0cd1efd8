"""Authentication service."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staff_audit.config import settings
from staff_audit.models.user import User
from staff_audit.schemas.auth import TokenResponse, UserResponse
from staff_audit.utils.security import create_access_token, verify_password


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """
    Authenticate a user by username (case-insensitive) and password.

    Returns:
        User object if authentication succeeds, None otherwise
    """
    result = await db.execute(select(User).where(User.username_lower == username.lower()))
    user = result.scalar_one_or_none()
    return user if user and verify_password(password, user.hashed_password) else None


def create_token_response(user: User) -> TokenResponse:
    """Issue a bearer token for an authenticated user."""
    access_token = create_access_token({"sub": user.username, "user_id": user.id})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )

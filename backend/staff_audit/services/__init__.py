"""Services package."""

from staff_audit.services.auth import authenticate_user, create_token_response

__all__ = ["authenticate_user", "create_token_response"]

"""Business logic services."""

from app.services.auth_service import AuthService, LoginResult, UserPage

__all__ = [
    "AuthService",
    "LoginResult",
    "UserPage",
]

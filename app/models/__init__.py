"""SQLModel database models."""

from app.models.user import User
from app.models.user_session import UserSession

__all__ = [
    "User",
    "UserSession",
]

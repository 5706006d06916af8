"""
Token API schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.user import UserResponse


class RefreshRequest(BaseModel):
    """Schema for exchanging a refresh token."""
    refresh_token: str


class Token(BaseModel):
    """Schema for an access token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class LoginResponse(Token):
    """Schema for a successful login: both tokens plus the user."""
    refresh_token: str
    session_id: str
    session_expires_at: datetime
    user: UserResponse


class LogoutResponse(BaseModel):
    """Schema for logout results."""
    sessions_deleted: int

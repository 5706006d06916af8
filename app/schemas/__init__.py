"""Pydantic schemas for request/response validation."""

from app.schemas.response import Envelope, success
from app.schemas.token import LoginResponse, LogoutResponse, RefreshRequest, Token
from app.schemas.user import PasswordChange, UserCreate, UserListResponse, UserLogin, UserResponse, UserUpdate

__all__ = [
    "Envelope",
    "success",
    "Token",
    "LoginResponse",
    "LogoutResponse",
    "RefreshRequest",
    "UserCreate",
    "UserLogin",
    "UserUpdate",
    "PasswordChange",
    "UserResponse",
    "UserListResponse",
]

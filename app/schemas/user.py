"""
User API schemas.

Pydantic models for user-related request/response validation. Field
rules for email, name and password live in the service validator, so
request bodies accept plain strings and every rejection carries the
service's error code.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# Request schemas
class UserCreate(BaseModel):
    """Schema for user registration."""
    email: str = Field(..., description="Email address, e.g. jane@example.com")
    name: str = Field(..., description="Display name (1-255 characters)")
    password: str = Field(..., description="Password (8-128 characters)")


class UserLogin(BaseModel):
    """Schema for user login."""
    email: str
    password: str


class UserUpdate(BaseModel):
    """Schema for updating user profile."""
    name: str
    email: str


class PasswordChange(BaseModel):
    """Schema for changing the current password."""
    old_password: str
    new_password: str = Field(..., description="New password (8-128 characters)")


# Response schemas
class UserResponse(BaseModel):
    """Schema for user data in API responses (no sensitive data)."""
    model_config = ConfigDict(from_attributes=True)  # Allows creation from SQLModel objects

    id: str
    email: str
    name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """One page of users."""
    items: list[UserResponse] = Field(..., description="Users in the current page")
    total: int = Field(..., description="Total number of non-deleted users", ge=0)
    limit: int = Field(..., description="Maximum items per page", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.offset + len(self.items) < self.total

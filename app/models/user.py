"""
User database model.

Defines the User table for authentication and user management.
"""

import datetime
import uuid
from typing import Optional

from sqlalchemy import Index, text
from sqlmodel import Field, SQLModel

from app.core.clock import utcnow


def new_id() -> str:
    return str(uuid.uuid4())


class User(SQLModel, table=True):
    """
    User model for authentication.

    Stores credentials and profile information. Rows are soft-deleted:
    ``deleted_at`` is set instead of removing the row, and email
    uniqueness only applies among rows that are not deleted.
    """
    __tablename__ = "users"
    __table_args__ = (
        Index("uq_users_email_active", "email", unique=True,
              postgresql_where=text("deleted_at IS NULL"),
              sqlite_where=text("deleted_at IS NULL")),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    email: str = Field(max_length=255, nullable=False)
    name: str = Field(max_length=255, nullable=False)
    password_hash: str = Field(nullable=False)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=utcnow)
    updated_at: datetime.datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime.datetime] = Field(default=None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

"""
User session database model.

A session is created on login and holds the digest of the refresh token
issued with it. The raw refresh token is never stored.
"""

import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from app.core.clock import utcnow
from app.models.user import new_id


class UserSession(SQLModel, table=True):
    """Refresh-token session owned by a user."""

    __tablename__ = "user_sessions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True, max_length=36)
    refresh_token_hash: str = Field(nullable=False, unique=True, index=True, max_length=64)

    # Provenance
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=512)

    expires_at: datetime.datetime = Field(nullable=False, index=True)
    created_at: datetime.datetime = Field(default_factory=utcnow)

    def is_expired(self, now: datetime.datetime) -> bool:
        """A session is usable only while ``now < expires_at``."""
        return now >= self.expires_at

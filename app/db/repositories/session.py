"""
User session repository.

Handles database operations for :class:`UserSession`.
"""

import datetime
from typing import Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from app.db.repositories.base import translate_db_errors
from app.models.user_session import UserSession


class SessionRepository:
    """Repository for UserSession database operations."""

    def __init__(self, session: Session):
        self.session = session

    @translate_db_errors
    def create(self, user_session: UserSession) -> UserSession:
        self.session.add(user_session)
        self.session.commit()
        self.session.refresh(user_session)
        return user_session

    @translate_db_errors
    def get_by_id(self, session_id: str) -> Optional[UserSession]:
        return self.session.get(UserSession, session_id)

    @translate_db_errors
    def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        statement = select(UserSession).where(UserSession.refresh_token_hash == token_hash)
        return self.session.exec(statement).first()

    @translate_db_errors
    def list_by_user(self, user_id: str) -> list[UserSession]:
        statement = (select(UserSession).where(UserSession.user_id == user_id).order_by(UserSession.created_at))
        return list(self.session.exec(statement).all())

    @translate_db_errors
    def delete(self, session_id: str) -> bool:
        """Delete a session by ID. Returns False if it did not exist."""
        user_session = self.session.get(UserSession, session_id)
        if not user_session:
            return False
        self.session.delete(user_session)
        self.session.commit()
        return True

    @translate_db_errors
    def delete_expired(self, now: datetime.datetime) -> int:
        """Delete every session whose expiry is not after ``now``.

        Returns the number of deleted rows.
        """
        result = self.session.exec(delete(UserSession).where(UserSession.expires_at <= now))
        self.session.commit()
        return result.rowcount

"""
In-memory repositories.

Used for development and tests when no database is configured. Both
repositories share one :class:`InMemoryStore`; a single lock guards all
of its maps, so a uniqueness check and the insert that follows it are
atomic with respect to other requests.
"""

import datetime
import threading
from typing import Optional

from app.core.errors import UserAlreadyExistsError
from app.models.user import User
from app.models.user_session import UserSession


class InMemoryStore:
    """Process-local maps of users and sessions guarded by one lock."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.users: dict[str, User] = {}
        self.sessions: dict[str, UserSession] = {}

    def clear(self) -> None:
        with self.lock:
            self.users.clear()
            self.sessions.clear()


def _is_visible(user: User) -> bool:
    return not user.is_deleted


def _detached(user: User) -> User:
    # Callers get their own copy; stored rows change only through the repository
    return User.model_validate(user.model_dump())


class InMemoryUserRepository:
    """UserRepository backed by an :class:`InMemoryStore`."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def create(self, user: User) -> User:
        with self.store.lock:
            if self._email_taken(user.email, exclude_id=None):
                raise UserAlreadyExistsError()
            self.store.users[user.id] = _detached(user)
            return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        with self.store.lock:
            user = self._get_visible(user_id)
            return _detached(user) if user is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        with self.store.lock:
            user = next((u for u in self.store.users.values() if u.email == email and _is_visible(u)), None)
            return _detached(user) if user is not None else None

    def exists_by_email(self, email: str) -> bool:
        with self.store.lock:
            return self._email_taken(email, exclude_id=None)

    def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        with self.store.lock:
            users = sorted(
                (u for u in self.store.users.values() if _is_visible(u)),
                key=lambda u: (u.created_at, u.id),
            )
            return [_detached(u) for u in users[skip:skip + limit]]

    def count(self) -> int:
        with self.store.lock:
            return sum(1 for u in self.store.users.values() if _is_visible(u))

    def update(self, user: User) -> User:
        with self.store.lock:
            if self._email_taken(user.email, exclude_id=user.id):
                raise UserAlreadyExistsError()
            self.store.users[user.id] = _detached(user)
            return user

    def soft_delete(self, user_id: str, deleted_at: datetime.datetime) -> bool:
        with self.store.lock:
            user = self._get_visible(user_id)
            if user is None:
                return False
            user.deleted_at = deleted_at
            user.updated_at = deleted_at
            return True

    # Helpers below expect the caller to hold the lock

    def _get_visible(self, user_id: str) -> Optional[User]:
        user = self.store.users.get(user_id)
        return user if user is not None and _is_visible(user) else None

    def _email_taken(self, email: str, exclude_id: Optional[str]) -> bool:
        return any(u.email == email and u.id != exclude_id and _is_visible(u) for u in self.store.users.values())


class InMemorySessionRepository:
    """SessionRepository backed by an :class:`InMemoryStore`."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def create(self, user_session: UserSession) -> UserSession:
        with self.store.lock:
            self.store.sessions[user_session.id] = user_session
            return user_session

    def get_by_id(self, session_id: str) -> Optional[UserSession]:
        with self.store.lock:
            return self.store.sessions.get(session_id)

    def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        with self.store.lock:
            return next((s for s in self.store.sessions.values() if s.refresh_token_hash == token_hash), None)

    def list_by_user(self, user_id: str) -> list[UserSession]:
        with self.store.lock:
            sessions = [s for s in self.store.sessions.values() if s.user_id == user_id]
        return sorted(sessions, key=lambda s: s.created_at)

    def delete(self, session_id: str) -> bool:
        with self.store.lock:
            return self.store.sessions.pop(session_id, None) is not None

    def delete_expired(self, now: datetime.datetime) -> int:
        with self.store.lock:
            expired = [sid for sid, s in self.store.sessions.items() if s.is_expired(now)]
            for sid in expired:
                del self.store.sessions[sid]
            return len(expired)

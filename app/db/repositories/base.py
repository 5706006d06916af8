"""
Repository contracts.

The service depends on these protocols only; SQL and in-memory
repositories both satisfy them. Lookups never return soft-deleted users.
"""

import datetime
import functools
from typing import Callable, Optional, Protocol, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from app.models.user import User
from app.models.user_session import UserSession

F = TypeVar("F", bound=Callable)


class StorageError(Exception):
    """Raised when the backing store fails for reasons other than a domain rule."""


def translate_db_errors(func: F) -> F:
    """Re-raise SQLAlchemy failures from a repository method as StorageError.

    The database session is rolled back so it stays usable afterwards.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"{func.__qualname__} failed: {e}") from e

    return wrapper  # type: ignore[return-value]


class UserRepositoryPort(Protocol):
    def create(self, user: User) -> User: ...
    def get_by_id(self, user_id: str) -> Optional[User]: ...
    def get_by_email(self, email: str) -> Optional[User]: ...
    def exists_by_email(self, email: str) -> bool: ...
    def update(self, user: User) -> User: ...
    def soft_delete(self, user_id: str, deleted_at: datetime.datetime) -> bool: ...
    def get_all(self, skip: int = 0, limit: int = 100) -> list[User]: ...
    def count(self) -> int: ...


class SessionRepositoryPort(Protocol):
    def create(self, user_session: UserSession) -> UserSession: ...
    def get_by_id(self, session_id: str) -> Optional[UserSession]: ...
    def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]: ...
    def list_by_user(self, user_id: str) -> list[UserSession]: ...
    def delete(self, session_id: str) -> bool: ...
    def delete_expired(self, now: datetime.datetime) -> int: ...

"""
User repository.

Handles database operations for User model. Soft-deleted users are
filtered out here, in one place, for every read.
"""

import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from app.core.errors import UserAlreadyExistsError
from app.db.repositories.base import StorageError, translate_db_errors
from app.models.user import User


def _not_deleted():
    """Query filter selecting users that have not been soft-deleted."""
    return col(User.deleted_at).is_(None)


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, user: User) -> User:
        """
        Create a new user in the database.

        Args:
            user: User instance to create

        Returns:
            Created user

        Raises:
            UserAlreadyExistsError: If the active-email unique index rejects the row
            StorageError: On any other database failure
        """
        return self._save(user)

    @translate_db_errors
    def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User instance if found and not deleted, None otherwise
        """
        statement = select(User).where(User.id == user_id, _not_deleted())
        return self.session.exec(statement).first()

    @translate_db_errors
    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: User email (case-sensitive)

        Returns:
            User instance if found and not deleted, None otherwise
        """
        statement = select(User).where(User.email == email, _not_deleted())
        return self.session.exec(statement).first()

    def exists_by_email(self, email: str) -> bool:
        """
        Check if a non-deleted user with the given email exists.

        Args:
            email: Email to check

        Returns:
            True if user exists, False otherwise
        """
        return self.get_by_email(email) is not None

    @translate_db_errors
    def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        """
        Get non-deleted users with pagination, oldest first.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of users
        """
        statement = (select(User).where(_not_deleted()).order_by(User.created_at, User.id).offset(skip).limit(limit))
        return list(self.session.exec(statement).all())

    @translate_db_errors
    def count(self) -> int:
        """Count non-deleted users."""
        statement = select(func.count()).select_from(User).where(_not_deleted())
        return int(self.session.exec(statement).one())

    def update(self, user: User) -> User:
        """
        Update an existing user.

        Args:
            user: User instance with updated data

        Returns:
            Updated user
        """
        return self._save(user)

    @translate_db_errors
    def soft_delete(self, user_id: str, deleted_at: datetime.datetime) -> bool:
        """
        Mark a user as deleted.

        Args:
            user_id: User ID to delete
            deleted_at: Deletion timestamp

        Returns:
            True if deleted, False if not found or already deleted
        """
        user = self.get_by_id(user_id)
        if not user:
            return False
        user.deleted_at = deleted_at
        user.updated_at = deleted_at
        self.session.add(user)
        self.session.commit()
        return True

    def _save(self, user: User) -> User:
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            self.session.rollback()
            raise UserAlreadyExistsError() from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"saving user failed: {e}") from e
        return user

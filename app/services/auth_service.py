"""
Authentication service.

Business logic for registration, login, token refresh, logout, profile
and password changes, and account deletion. The service owns every
decision to create, change or remove users and sessions; repositories
only store and return them.
"""

import datetime
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import structlog

from app.core.clock import Clock, SystemClock
from app.core.errors import (InternalError, InvalidCredentialsError, InvalidPasswordError, SessionExpiredError,
                             SessionNotFoundError, UnauthorizedError, UserAlreadyExistsError, UserNotFoundError, )
from app.core.security import PasswordHasher, TokenIssuer
from app.core.validation import InputValidator
from app.db.repositories.base import SessionRepositoryPort, StorageError, UserRepositoryPort
from app.models.user import User
from app.models.user_session import UserSession

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


@dataclass
class LoginResult:
    user: User
    access_token: str
    refresh_token: str
    session: UserSession


@dataclass
class UserPage:
    items: list[User]
    total: int
    limit: int
    offset: int


class AuthService:
    """Service for user and session lifecycle."""

    def __init__(
        self,
        users: UserRepositoryPort,
        sessions: SessionRepositoryPort,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
        validator: Optional[InputValidator] = None,
        logger: Optional[Any] = None,
        clock: Optional[Clock] = None,
        session_duration: datetime.timedelta = datetime.timedelta(hours=24),
        revoke_sessions_on_password_change: bool = False,
    ):
        """
        Initialize service with its collaborators.

        Args:
            users: User repository
            sessions: Session repository
            hasher: Password hasher
            tokens: Access/refresh token issuer
            validator: Input validator for email, name and password
            logger: structlog logger
            clock: Source of the current time
            session_duration: Lifetime of a login session
            revoke_sessions_on_password_change: Drop all sessions after a password change
        """
        self.users = users
        self.sessions = sessions
        self.hasher = hasher
        self.tokens = tokens
        self.validator = validator or InputValidator()
        self.logger = logger or structlog.get_logger(__name__)
        self.clock = clock or SystemClock()
        self.session_duration = session_duration
        self.revoke_sessions_on_password_change = revoke_sessions_on_password_change

    # ------------------------------------------------------------------
    # Registration and authentication
    # ------------------------------------------------------------------

    def register(self, email: str, name: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            InvalidEmailError, InvalidNameError, InvalidPasswordError: First failing check
            UserAlreadyExistsError: If a non-deleted user has the email
        """
        self.validator.validate_registration(email, name, password)

        with self._storage("register_failed", email=email):
            if self.users.exists_by_email(email):
                self.logger.warning("register_email_taken", email=email)
                raise UserAlreadyExistsError()

            now = self.clock.now()
            user = User(email=email, name=name, password_hash=self.hasher.hash(password), is_active=True,
                        created_at=now, updated_at=now, )
            user = self.users.create(user)

        self.logger.info("user_registered", user_id=user.id, email=user.email)
        return user

    def login(self, email: str, password: str, ip_address: Optional[str] = None,
              user_agent: Optional[str] = None, ) -> LoginResult:
        """
        Authenticate user and open a new session.

        A missing user and a wrong password fail identically.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            UnauthorizedError: If the account is inactive
        """
        with self._storage("login_failed", email=email):
            user = self.users.get_by_email(email)

            if user is None:
                # Spend the same bcrypt time as a real check
                self.hasher.verify_dummy(password)
                self.logger.warning("login_failed", reason="unknown_email", email=email)
                raise InvalidCredentialsError()

            if not self.hasher.verify(password, user.password_hash):
                self.logger.warning("login_failed", reason="bad_password", email=email)
                raise InvalidCredentialsError()

            if not user.is_active:
                self.logger.warning("login_failed", reason="inactive", user_id=user.id)
                raise UnauthorizedError("User account is inactive")

            refresh_token = self.tokens.issue_refresh_token()
            now = self.clock.now()
            user_session = UserSession(user_id=user.id, refresh_token_hash=self.tokens.hash_for_storage(refresh_token),
                                       ip_address=ip_address, user_agent=user_agent,
                                       expires_at=now + self.session_duration, created_at=now, )
            user_session = self.sessions.create(user_session)

        access_token = self.tokens.issue_access_token(user.id, user.email, session_id=user_session.id)
        self.logger.info("user_logged_in", user_id=user.id, session_id=user_session.id)
        return LoginResult(user=user, access_token=access_token, refresh_token=refresh_token, session=user_session)

    def refresh_token(self, refresh_token: str) -> str:
        """
        Issue a new access token for a valid refresh token.

        The refresh token and its session are left unchanged.

        Raises:
            SessionNotFoundError: No session holds this token
            SessionExpiredError: Session expired (and is deleted as a side effect)
            UserNotFoundError: Session owner is missing or deleted
        """
        token_hash = self.tokens.hash_for_storage(refresh_token)

        with self._storage("refresh_failed"):
            user_session = self.sessions.get_by_token_hash(token_hash)
            if user_session is None:
                raise SessionNotFoundError()

            if user_session.is_expired(self.clock.now()):
                self.sessions.delete(user_session.id)
                self.logger.info("session_expired", session_id=user_session.id, user_id=user_session.user_id)
                raise SessionExpiredError()

            user = self.users.get_by_id(user_session.user_id)
            if user is None:
                raise UserNotFoundError()

        self.logger.info("token_refreshed", user_id=user.id, session_id=user_session.id)
        return self.tokens.issue_access_token(user.id, user.email, session_id=user_session.id)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        with self._storage("get_user_failed", user_id=user_id):
            user = self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def get_user_by_email(self, email: str) -> User:
        with self._storage("get_user_failed", email=email):
            user = self.users.get_by_email(email)
        if user is None:
            raise UserNotFoundError()
        return user

    def update_profile(self, user_id: str, name: str, email: str) -> User:
        """
        Update name and email of a user. Name is validated before email.

        Raises:
            InvalidNameError, InvalidEmailError: Validation failures
            UserNotFoundError: User missing or deleted
            UserAlreadyExistsError: Another user already has the new email
        """
        self.validator.validate_name(name)
        self.validator.validate_email(email)

        with self._storage("update_profile_failed", user_id=user_id):
            user = self.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError()

            if email != user.email:
                other = self.users.get_by_email(email)
                if other is not None and other.id != user.id:
                    raise UserAlreadyExistsError()

            user.name = name
            user.email = email
            user.updated_at = self.clock.now()
            user = self.users.update(user)

        self.logger.info("user_profile_updated", user_id=user.id)
        return user

    def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """
        Change a user's password after checking the current one.

        Raises:
            UserNotFoundError: User missing or deleted
            InvalidPasswordError: Old password wrong, or new password out of bounds
        """
        with self._storage("change_password_failed", user_id=user_id):
            user = self.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError()

            if not self.hasher.verify(old_password, user.password_hash):
                self.logger.warning("change_password_failed", reason="bad_old_password", user_id=user_id)
                raise InvalidPasswordError("Old password is incorrect")

            self.validator.validate_password(new_password)

            user.password_hash = self.hasher.hash(new_password)
            user.updated_at = self.clock.now()
            self.users.update(user)

        self.logger.info("password_changed", user_id=user_id)
        if self.revoke_sessions_on_password_change:
            self.logout_all_sessions(user_id)

    def delete_user(self, user_id: str) -> None:
        """
        Soft-delete a user and drop their sessions.

        Session cleanup is best effort: failures are logged, not raised.

        Raises:
            UserNotFoundError: User missing or already deleted
        """
        with self._storage("delete_user_failed", user_id=user_id):
            if self.users.get_by_id(user_id) is None:
                raise UserNotFoundError()
            self.users.soft_delete(user_id, self.clock.now())

        try:
            self.logout_all_sessions(user_id)
        except InternalError:
            self.logger.warning("delete_user_session_cleanup_failed", user_id=user_id)

        self.logger.info("user_deleted", user_id=user_id)

    def list_users(self, limit: int = DEFAULT_PAGE_LIMIT, offset: int = 0) -> UserPage:
        """
        Page through non-deleted users.

        ``limit`` outside (0, 100] falls back to 10; negative ``offset`` becomes 0.
        The total is counted by a separate query from the page.
        """
        if limit <= 0 or limit > MAX_PAGE_LIMIT:
            limit = DEFAULT_PAGE_LIMIT
        if offset < 0:
            offset = 0

        with self._storage("list_users_failed", limit=limit, offset=offset):
            items = self.users.get_all(skip=offset, limit=limit)
            total = self.users.count()

        return UserPage(items=items, total=total, limit=limit, offset=offset)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def logout(self, session_id: str) -> None:
        """
        Delete one session.

        Raises:
            SessionNotFoundError: No such session
        """
        with self._storage("logout_failed", session_id=session_id):
            user_session = self.sessions.get_by_id(session_id)
            if user_session is None:
                raise SessionNotFoundError()
            self.sessions.delete(session_id)

        self.logger.info("user_logged_out", user_id=user_session.user_id, session_id=session_id)

    def logout_all_sessions(self, user_id: str) -> int:
        """
        Delete every session of a user.

        Individual deletion failures are logged and skipped.

        Returns:
            Number of sessions deleted
        """
        with self._storage("list_sessions_failed", user_id=user_id):
            user_sessions = self.sessions.list_by_user(user_id)

        deleted = 0
        for user_session in user_sessions:
            try:
                if self.sessions.delete(user_session.id):
                    deleted += 1
            except StorageError as e:
                self.logger.warning("session_delete_failed", session_id=user_session.id, error=str(e))

        self.logger.info("all_sessions_deleted", user_id=user_id, count=deleted)
        return deleted

    def purge_expired_sessions(self) -> int:
        """Delete all expired sessions. Returns the number removed."""
        with self._storage("purge_sessions_failed"):
            removed = self.sessions.delete_expired(self.clock.now())
        self.logger.info("expired_sessions_purged", count=removed)
        return removed

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _storage(self, event: str, **context: Any) -> Iterator[None]:
        """Turn storage failures into InternalError, logging the detail."""
        try:
            yield
        except StorageError as e:
            self.logger.error(event, error=str(e), **context)
            raise InternalError() from e

"""
Unit tests for the SQL repositories against an in-memory SQLite database.
"""

import datetime

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.core.errors import UserAlreadyExistsError
from app.db.repositories import SessionRepository, StorageError, UserRepository
from app.models.user import User
from app.models.user_session import UserSession

T0 = datetime.datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def users(db):
    return UserRepository(db)


@pytest.fixture
def sessions(db):
    return SessionRepository(db)


def _user(email: str = "jane@example.com", minutes: int = 0) -> User:
    at = T0 + datetime.timedelta(minutes=minutes)
    return User(email=email, name="Jane", password_hash="$2b$04$hash", created_at=at, updated_at=at)


def _session(user_id: str, token_hash: str, expires_in_hours: int = 24) -> UserSession:
    return UserSession(user_id=user_id, refresh_token_hash=token_hash, created_at=T0,
                       expires_at=T0 + datetime.timedelta(hours=expires_in_hours))


# ======================================================================
# UserRepository
# ======================================================================


class TestUserRepository:

    def test_create_and_lookup(self, users):
        user = users.create(_user())
        assert users.get_by_id(user.id).email == "jane@example.com"
        assert users.get_by_email("jane@example.com").id == user.id
        assert users.exists_by_email("jane@example.com") is True
        assert users.exists_by_email("other@example.com") is False

    def test_duplicate_active_email_rejected(self, users):
        users.create(_user())
        with pytest.raises(UserAlreadyExistsError):
            users.create(_user())
        # Session stays usable after the rollback
        assert users.count() == 1

    def test_soft_delete_hides_user(self, users):
        user = users.create(_user())
        assert users.soft_delete(user.id, T0) is True
        assert users.get_by_id(user.id) is None
        assert users.get_by_email("jane@example.com") is None
        assert users.count() == 0
        assert users.soft_delete(user.id, T0) is False

    def test_deleted_email_can_be_reused(self, users):
        old = users.create(_user())
        users.soft_delete(old.id, T0)
        new = users.create(_user())
        assert new.id != old.id
        assert users.get_by_email("jane@example.com").id == new.id

    def test_update(self, users):
        user = users.create(_user())
        user.name = "Janet"
        users.update(user)
        assert users.get_by_id(user.id).name == "Janet"

    def test_update_to_taken_email(self, users):
        users.create(_user("a@example.com"))
        other = users.create(_user("b@example.com"))
        other.email = "a@example.com"
        with pytest.raises(UserAlreadyExistsError):
            users.update(other)

    def test_get_all_paging(self, users):
        created = [users.create(_user(f"u{i}@example.com", minutes=i)) for i in range(5)]
        users.soft_delete(created[0].id, T0)
        page = users.get_all(skip=1, limit=2)
        assert [u.id for u in page] == [created[2].id, created[3].id]
        assert users.count() == 4

    def test_database_failure_becomes_storage_error(self, users, db):
        SQLModel.metadata.drop_all(db.get_bind())
        with pytest.raises(StorageError) as exc_info:
            users.get_by_email("jane@example.com")
        assert isinstance(exc_info.value.__cause__, OperationalError)


# ======================================================================
# SessionRepository
# ======================================================================


class TestSessionRepository:

    def test_create_and_lookup(self, users, sessions):
        user = users.create(_user())
        s = sessions.create(_session(user.id, "h1"))
        assert sessions.get_by_id(s.id).user_id == user.id
        assert sessions.get_by_token_hash("h1").id == s.id
        assert sessions.get_by_token_hash("nope") is None

    def test_list_and_delete(self, users, sessions):
        user = users.create(_user())
        a = sessions.create(_session(user.id, "h1"))
        sessions.create(_session(user.id, "h2"))
        assert len(sessions.list_by_user(user.id)) == 2
        assert sessions.delete(a.id) is True
        assert sessions.delete(a.id) is False
        assert [s.refresh_token_hash for s in sessions.list_by_user(user.id)] == ["h2"]

    def test_delete_expired(self, users, sessions):
        user = users.create(_user())
        sessions.create(_session(user.id, "old", expires_in_hours=1))
        sessions.create(_session(user.id, "new", expires_in_hours=48))
        removed = sessions.delete_expired(T0 + datetime.timedelta(hours=2))
        assert removed == 1
        assert [s.refresh_token_hash for s in sessions.list_by_user(user.id)] == ["new"]

"""
Unit tests for the in-memory user and session repositories.
"""

import datetime
import threading

import pytest

from app.core.errors import UserAlreadyExistsError
from app.models.user import User
from app.models.user_session import UserSession

T0 = datetime.datetime(2026, 1, 1, 12, 0, 0)


def _user(email: str = "jane@example.com", minutes: int = 0) -> User:
    at = T0 + datetime.timedelta(minutes=minutes)
    return User(email=email, name="Jane", password_hash="$2b$04$hash", created_at=at, updated_at=at)


def _session(user_id: str, token_hash: str, expires_in_hours: int = 24) -> UserSession:
    return UserSession(user_id=user_id, refresh_token_hash=token_hash, created_at=T0,
                       expires_at=T0 + datetime.timedelta(hours=expires_in_hours))


# ======================================================================
# Users
# ======================================================================


class TestInMemoryUsers:

    def test_create_and_lookup(self, user_repo):
        user = user_repo.create(_user())
        assert user_repo.get_by_id(user.id).id == user.id
        assert user_repo.get_by_email("jane@example.com").id == user.id
        assert user_repo.exists_by_email("jane@example.com") is True
        assert user_repo.exists_by_email("JANE@example.com") is False

    def test_duplicate_email_rejected(self, user_repo):
        user_repo.create(_user())
        with pytest.raises(UserAlreadyExistsError):
            user_repo.create(_user())

    def test_soft_deleted_hidden_everywhere(self, user_repo):
        user = user_repo.create(_user())
        assert user_repo.soft_delete(user.id, T0) is True
        assert user_repo.get_by_id(user.id) is None
        assert user_repo.get_by_email(user.email) is None
        assert user_repo.count() == 0
        assert user_repo.get_all() == []

    def test_soft_delete_twice(self, user_repo):
        user = user_repo.create(_user())
        assert user_repo.soft_delete(user.id, T0) is True
        assert user_repo.soft_delete(user.id, T0) is False

    def test_deleted_email_can_be_reused(self, user_repo):
        old = user_repo.create(_user())
        user_repo.soft_delete(old.id, T0)
        new = user_repo.create(_user())
        assert new.id != old.id
        assert user_repo.get_by_email("jane@example.com").id == new.id

    def test_update_email_clash(self, user_repo):
        user_repo.create(_user("a@example.com"))
        other = user_repo.create(_user("b@example.com"))
        other.email = "a@example.com"
        with pytest.raises(UserAlreadyExistsError):
            user_repo.update(other)

    def test_update_onto_email_registered_meanwhile(self, user_repo):
        a = user_repo.create(_user("a@example.com"))
        loaded = user_repo.get_by_id(a.id)
        # Another request takes the address after the caller read its copy
        user_repo.create(_user("x@example.com"))
        loaded.email = "x@example.com"
        with pytest.raises(UserAlreadyExistsError):
            user_repo.update(loaded)
        assert user_repo.get_by_id(a.id).email == "a@example.com"

    def test_returned_users_are_copies(self, user_repo, store):
        user = user_repo.create(_user())
        loaded = user_repo.get_by_id(user.id)
        loaded.email = "changed@example.com"
        user.name = "Changed"
        assert store.users[user.id].email == "jane@example.com"
        assert store.users[user.id].name == "Jane"
        assert user_repo.get_all()[0] is not store.users[user.id]

    def test_get_all_ordered_and_paged(self, user_repo):
        created = [user_repo.create(_user(f"u{i}@example.com", minutes=i)) for i in range(5)]
        assert [u.id for u in user_repo.get_all()] == [u.id for u in created]
        assert [u.id for u in user_repo.get_all(skip=1, limit=2)] == [created[1].id, created[2].id]
        assert user_repo.count() == 5

    def test_concurrent_registration_single_winner(self, user_repo):
        outcomes = []

        def attempt():
            try:
                user_repo.create(_user())
                outcomes.append("ok")
            except UserAlreadyExistsError:
                outcomes.append("dup")

        threads = [threading.Thread(target=attempt) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert outcomes.count("ok") == 1
        assert outcomes.count("dup") == 9


# ======================================================================
# Sessions
# ======================================================================


class TestInMemorySessions:

    def test_create_and_lookup(self, session_repo):
        s = session_repo.create(_session("u1", "h1"))
        assert session_repo.get_by_id(s.id) is s
        assert session_repo.get_by_token_hash("h1") is s
        assert session_repo.get_by_token_hash("missing") is None

    def test_list_by_user(self, session_repo):
        session_repo.create(_session("u1", "h1"))
        session_repo.create(_session("u1", "h2"))
        session_repo.create(_session("u2", "h3"))
        assert {s.refresh_token_hash for s in session_repo.list_by_user("u1")} == {"h1", "h2"}
        assert session_repo.list_by_user("nobody") == []

    def test_delete(self, session_repo):
        s = session_repo.create(_session("u1", "h1"))
        assert session_repo.delete(s.id) is True
        assert session_repo.delete(s.id) is False
        assert session_repo.get_by_id(s.id) is None

    def test_delete_expired(self, session_repo):
        session_repo.create(_session("u1", "old", expires_in_hours=1))
        keep = session_repo.create(_session("u1", "new", expires_in_hours=48))
        removed = session_repo.delete_expired(T0 + datetime.timedelta(hours=2))
        assert removed == 1
        assert session_repo.list_by_user("u1") == [keep]

    def test_store_clear(self, store, user_repo, session_repo):
        user_repo.create(_user())
        session_repo.create(_session("u1", "h1"))
        store.clear()
        assert user_repo.count() == 0
        assert session_repo.get_by_token_hash("h1") is None

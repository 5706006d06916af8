"""
Shared pytest fixtures.

Environment defaults are set before any ``app`` module is imported, so the
settings singleton never needs a real database or a .env file.
"""

import datetime
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from app.core.security import PasswordHasher, TokenIssuer
from app.db.repositories import InMemorySessionRepository, InMemoryStore, InMemoryUserRepository
from app.services.auth_service import AuthService

TEST_SECRET = "unit-test-secret"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime.datetime | None = None):
        self.current = start or datetime.datetime(2026, 1, 1, 12, 0, 0)

    def now(self) -> datetime.datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += datetime.timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(scope="session")
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(secret_key=TEST_SECRET, issuer="userauth-api-tests")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def user_repo(store):
    return InMemoryUserRepository(store)


@pytest.fixture
def session_repo(store):
    return InMemorySessionRepository(store)


@pytest.fixture
def service(user_repo, session_repo, hasher, tokens, clock) -> AuthService:
    return AuthService(users=user_repo, sessions=session_repo, hasher=hasher, tokens=tokens, clock=clock)

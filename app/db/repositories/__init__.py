"""Database repositories."""

from app.db.repositories.base import SessionRepositoryPort, StorageError, UserRepositoryPort
from app.db.repositories.memory import InMemorySessionRepository, InMemoryStore, InMemoryUserRepository
from app.db.repositories.session import SessionRepository
from app.db.repositories.user import UserRepository

__all__ = [
    "UserRepository",
    "SessionRepository",
    "InMemoryStore",
    "InMemoryUserRepository",
    "InMemorySessionRepository",
    "UserRepositoryPort",
    "SessionRepositoryPort",
    "StorageError",
]

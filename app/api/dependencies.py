"""
Shared API dependencies.

Reusable FastAPI dependencies that build the auth service for a request
and authenticate the caller from the bearer token.
"""

import datetime
from functools import lru_cache
from typing import Generator, Optional

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from app.core.config import settings
from app.core.errors import UnauthorizedError
from app.core.security import AccessTokenClaims, PasswordHasher, TokenIssuer
from app.core.validation import InputValidator
from app.db.repositories import (InMemorySessionRepository, InMemoryStore, InMemoryUserRepository, SessionRepository,
                                 UserRepository, )
from app.db.session import engine
from app.services.auth_service import AuthService

bearer_scheme = HTTPBearer(auto_error=False)

# Shared by every request when STORAGE_BACKEND=memory
memory_store = InMemoryStore()


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM,
                       access_token_ttl=datetime.timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
                       issuer=settings.JWT_ISSUER, )


def get_validator() -> InputValidator:
    return InputValidator()


def get_repositories() -> Generator[tuple, None, None]:
    """Yield (user repository, session repository) for the configured backend."""
    if settings.STORAGE_BACKEND == "memory":
        yield InMemoryUserRepository(memory_store), InMemorySessionRepository(memory_store)
        return

    with Session(engine) as session:
        yield UserRepository(session), SessionRepository(session)


def get_auth_service(repositories: tuple = Depends(get_repositories),
                     hasher: PasswordHasher = Depends(get_password_hasher),
                     tokens: TokenIssuer = Depends(get_token_issuer),
                     validator: InputValidator = Depends(get_validator), ) -> AuthService:
    users, sessions = repositories
    return AuthService(users=users, sessions=sessions, hasher=hasher, tokens=tokens, validator=validator,
                       logger=structlog.get_logger("app.services.auth_service"),
                       session_duration=datetime.timedelta(hours=settings.SESSION_EXPIRE_HOURS),
                       revoke_sessions_on_password_change=settings.REVOKE_SESSIONS_ON_PASSWORD_CHANGE, )


def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
                     tokens: TokenIssuer = Depends(get_token_issuer), ) -> AccessTokenClaims:
    """Extract and validate the caller's identity from the bearer access token."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing or invalid Authorization header")
    return tokens.verify_access_token(credentials.credentials)

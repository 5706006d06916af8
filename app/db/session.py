"""
Database session management.

Provides the SQLModel engine. Request-scoped sessions are opened in app.api.dependencies.
"""

from typing import Any

from sqlalchemy.engine import make_url
from sqlmodel import create_engine

from app.core.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Pool and timeout options suited to the database dialect."""
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return { "connect_args": { "check_same_thread": False } }

    options: dict[str, Any] = {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 5,  # Connection pool size
        "max_overflow": 10,  # Max connections beyond pool_size
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
    }
    if backend == "postgresql":
        # Abort statements that outlive the request budget
        options["connect_args"] = { "options": f"-c statement_timeout={settings.DATABASE_STATEMENT_TIMEOUT_MS}" }
    return options


# Create database engine
DATABASE_URL: str = settings.database_url

engine = create_engine(DATABASE_URL, echo=settings.DATABASE_ECHO, **_engine_options(DATABASE_URL))

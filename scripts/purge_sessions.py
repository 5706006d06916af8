"""
Expired session cleanup.

Deletes every session whose expiry time has passed. Meant to be run
periodically (cron, systemd timer) against the SQL backend.

Usage:
    python scripts/purge_sessions.py
"""

import sys
from datetime import timedelta
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import structlog
from sqlmodel import Session

from app.core.config import settings
from app.core.errors import InternalError
from app.core.logging import setup_logging
from app.core.security import PasswordHasher, TokenIssuer
from app.db.repositories import SessionRepository, UserRepository
from app.db.session import engine
from app.services.auth_service import AuthService

logger = structlog.get_logger("purge_sessions")


def purge() -> int:
    with Session(engine) as db:
        service = AuthService(
            users=UserRepository(db),
            sessions=SessionRepository(db),
            hasher=PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            tokens=TokenIssuer(settings.SECRET_KEY, settings.ALGORITHM,
                               timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES), settings.JWT_ISSUER),
            session_duration=timedelta(hours=settings.SESSION_EXPIRE_HOURS))
        return service.purge_expired_sessions()


if __name__ == "__main__":
    setup_logging(settings.DEBUG, settings.LOG_LEVEL)
    try:
        deleted = purge()
    except InternalError:
        logger.error("purge_failed")
        sys.exit(1)
    print(f"Deleted {deleted} expired session(s)")
    sys.exit(0)

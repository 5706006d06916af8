"""
Database initialization.

Creates all tables for the configured database.
"""

import structlog
from sqlmodel import SQLModel

from app.db.session import engine

logger = structlog.get_logger(__name__)


def init_db() -> None:
    """
    Initialize database schema.

    - Creates the users and user_sessions tables (and their indexes)
    """

    # Import all models so SQLModel.metadata has them
    import app.db.base  # noqa: F401

    logger.info("creating_tables", url=engine.url.render_as_string(hide_password=True))
    SQLModel.metadata.create_all(engine)
    logger.info("tables_created", tables=sorted(SQLModel.metadata.tables))


if __name__ == "__main__":
    init_db()

"""
Application startup and shutdown logic for the This or That API.
"""
import logging
from sqlalchemy import text

from thisorthat.core.database import engine, init_db

# Register model tables on Base.metadata before create_all
from thisorthat.models import answer, game, player, question  # noqa: F401

logger = logging.getLogger(__name__)


def initialize_database() -> None:
    """Initialize database tables and warm up connection pool."""
    try:
        init_db()
        logger.info("Database tables created/verified")

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection pool initialized")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def shutdown_database() -> None:
    """Clean up database connections."""
    try:
        engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error during database shutdown: {e}")
        # Don't re-raise during shutdown

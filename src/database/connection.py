"""
Database Connection Management.

This module handles the SQLAlchemy engine behind the relational record store.
It provides:
- Connection pooling sized for branch/country fan-out
- Session management
- Health checks

Supported URLs: MySQL (pymysql), PostgreSQL and SQLite.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.core.config import get_settings
from src.core.logging_config import get_logger

logger = get_logger(__name__)


def _engine_options(db_url: str, pool_size: int, max_overflow: int) -> Dict[str, Any]:
    """Pool arguments appropriate for the URL's dialect."""
    if db_url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every session sees an empty DB
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
    }


class DatabaseConnection:
    """
    Manages database connections and session lifecycle.

    Sessions are short-lived: one per store operation, so concurrent
    fetch threads never share a Session.

    Example:
        >>> db = DatabaseConnection("sqlite:///./swift_directory.db")
        >>> with db.get_session() as session:
        ...     session.execute(text("SELECT 1"))
    """

    def __init__(
        self,
        connection_url: Optional[str] = None,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
    ):
        """
        Initialize database engine with connection pooling.

        Args:
            connection_url: Optional connection URL. If not provided, uses settings.
            pool_size: Connections kept open (defaults to DB_POOL_SIZE)
            max_overflow: Extra connections under load (defaults to DB_MAX_OVERFLOW)
        """
        settings = get_settings()

        db_url = connection_url or settings.database_url
        self.url = db_url

        self.engine = create_engine(
            db_url,
            echo=False,
            **_engine_options(
                db_url,
                pool_size if pool_size is not None else settings.db_pool_size,
                max_overflow if max_overflow is not None else settings.db_max_overflow,
            ),
        )

        self._session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info(f"Database connection initialized: {db_url.split('@')[-1] if '@' in db_url else db_url}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session with automatic cleanup.

        Transactions are rolled back on error, committed on success.

        Yields:
            SQLAlchemy Session object
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error, rolling back: {e}")
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection is healthy, False otherwise.
        """
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            logger.debug("Database connection check: OK")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def close(self):
        """Close all connections in the pool."""
        self.engine.dispose()
        logger.info("Database connections closed")


# Module-level instance (singleton pattern)
_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """
    Get or create the database connection instance.

    Lazy initialization prevents connecting before app startup.

    Returns:
        DatabaseConnection singleton instance
    """
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection

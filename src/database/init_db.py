"""
Database Initialization - Create the bank_records table.

Called on API startup when the SQL store is configured, and by the loader
before importing data.
"""
from typing import Optional

from src.core.logging_config import get_logger
from src.database.connection import DatabaseConnection, get_database
from src.database.models import Base

logger = get_logger(__name__)


def init_bank_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Create the record tables if they don't exist.

    Args:
        db: Connection to use. Defaults to the shared instance.

    Returns:
        True if tables were created successfully
    """
    try:
        db = db or get_database()
        Base.metadata.create_all(db.engine)

        logger.info("Bank record tables initialized successfully")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize bank record tables: {e}")
        raise


def drop_bank_tables(db: Optional[DatabaseConnection] = None) -> bool:
    """
    Drop the record tables (use with caution!).

    This is mainly for testing/development purposes.

    Returns:
        True if tables were dropped successfully
    """
    try:
        db = db or get_database()
        Base.metadata.drop_all(db.engine)

        logger.warning("Bank record tables dropped")
        return True

    except Exception as e:
        logger.error(f"Failed to drop bank record tables: {e}")
        raise


if __name__ == "__main__":
    # Allow running directly to create tables
    print("Initializing bank record tables...")
    init_bank_tables()
    print("Done!")

"""
Record store selection.

STORE_BACKEND=sql   -> SQLRecordStore over the configured DATABASE_URL
STORE_BACKEND=memory -> InMemoryRecordStore (lost on restart)
"""
from typing import Optional

from src.core.config import Settings, get_settings
from src.core.logging_config import get_logger
from src.database.memory_store import InMemoryRecordStore
from src.database.sql_store import SQLRecordStore
from src.directory.store import RecordStore

logger = get_logger(__name__)

# Module-level instance (singleton pattern)
_record_store: Optional[RecordStore] = None


def create_record_store(settings: Optional[Settings] = None) -> RecordStore:
    """Build a new store for the configured backend."""
    settings = settings or get_settings()
    if settings.uses_sql_store():
        logger.info("Using SQL record store")
        return SQLRecordStore()
    logger.warning("Using in-memory record store (data is not persisted)")
    return InMemoryRecordStore()


def get_record_store() -> RecordStore:
    """
    Get or create the shared record store.

    Returns:
        RecordStore singleton instance
    """
    global _record_store
    if _record_store is None:
        _record_store = create_record_store()
    return _record_store


def reset_record_store() -> None:
    """Close and forget the shared store (used on shutdown and in tests)."""
    global _record_store
    if _record_store is not None:
        _record_store.close()
        _record_store = None

"""
Database module - relational and in-memory record stores.

This module handles:
- Database connection management
- The bank_records table
- RecordStore implementations (SQL, in-memory) and backend selection
- CSV/JSON data loading
"""
from src.database.connection import DatabaseConnection, get_database
from src.database.models import BankRecordRow, Base
from src.database.init_db import init_bank_tables, drop_bank_tables
from src.database.sql_store import SQLRecordStore
from src.database.memory_store import InMemoryRecordStore
from src.database.store_factory import create_record_store, get_record_store, reset_record_store
from src.database.loader import BankDataLoader, LoadResult

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    # Models
    "BankRecordRow",
    "Base",
    # Init
    "init_bank_tables",
    "drop_bank_tables",
    # Stores
    "SQLRecordStore",
    "InMemoryRecordStore",
    "create_record_store",
    "get_record_store",
    "reset_record_store",
    # Loader
    "BankDataLoader",
    "LoadResult",
]

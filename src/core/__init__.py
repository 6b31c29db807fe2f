"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy rendered by the API layer
- validators.py     : SWIFT code, country and record validation
- audit.py          : Request audit and security header middleware
"""
from src.core.config import get_settings, Settings
from src.core.logging_config import setup_logging, get_logger, LoggerMixin
from src.core.exceptions import (
    AggregationCancelledError,
    DirectoryException,
    MalformedIdentifier,
    RecordAlreadyExistsError,
    RecordNotFoundError,
    StoreError,
    ValidationError,
)

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "AggregationCancelledError",
    "DirectoryException",
    "MalformedIdentifier",
    "RecordAlreadyExistsError",
    "RecordNotFoundError",
    "StoreError",
    "ValidationError",
]

"""
Services module - Business logic layer.

Services orchestrate between the API layer and the directory core.
They contain the business logic and coordinate store access and
aggregation.
"""
from src.services.directory_service import (
    BankLookup,
    DirectoryService,
    get_directory_service,
    reset_directory_service,
)

__all__ = [
    "BankLookup",
    "DirectoryService",
    "get_directory_service",
    "reset_directory_service",
]

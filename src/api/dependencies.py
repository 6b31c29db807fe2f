"""
FastAPI dependency providers.

Routes receive the directory service and the validation rules through
Depends(), so tests can swap them via app.dependency_overrides.
"""
from functools import lru_cache

from src.core.validators import RecordRules, build_record_rules
from src.services.directory_service import DirectoryService, get_directory_service


@lru_cache(maxsize=1)
def get_record_rules() -> RecordRules:
    """The immutable rule set, built once per process."""
    return build_record_rules()


def get_service() -> DirectoryService:
    return get_directory_service()

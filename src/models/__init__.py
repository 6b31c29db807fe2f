"""
Models module - Pydantic schemas for data validation.

This module defines:
- Request models: Input validation for API endpoints
- Response models: Output formatting for API responses
"""
from src.models.bank import (
    BankCreateRequest,
    BankDetailsSchema,
    BankRecordSchema,
    CountryResponse,
    ErrorResponse,
    HeadquartersResponse,
    HealthResponse,
    MessageResponse,
)

__all__ = [
    "BankCreateRequest",
    "BankDetailsSchema",
    "BankRecordSchema",
    "CountryResponse",
    "ErrorResponse",
    "HeadquartersResponse",
    "HealthResponse",
    "MessageResponse",
]

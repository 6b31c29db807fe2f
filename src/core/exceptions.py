"""
Custom Exceptions - Application-specific error classes.

Every exception carries an HTTP status code and a machine-readable error
code. The API layer renders them through a single handler, so services
and stores only need to raise.
"""
from typing import Optional


class DirectoryException(Exception):
    """
    Base exception for all directory service errors.

    Subclass this for specific error types.
    """
    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Convert to error response dict."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(DirectoryException):
    """Raised when input validation fails."""
    status_code = 400
    error_code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details=f"field={field}" if field else None)
        self.field = field


class MalformedIdentifier(ValidationError):
    """Raised when a SWIFT code violates the 8/11 character structure."""
    error_code = "malformed_identifier"

    def __init__(self, identifier: str, reason: str):
        super().__init__(
            f"Malformed SWIFT code '{identifier}': {reason}",
            field="swiftCode"
        )
        self.identifier = identifier
        self.reason = reason


class RecordNotFoundError(DirectoryException):
    """Raised when a SWIFT code has no stored record."""
    status_code = 404
    error_code = "record_not_found"

    def __init__(self, swift_code: str):
        super().__init__(
            message=f"The SWIFT code {swift_code} was not found",
            details=f"swift_code={swift_code}"
        )
        self.swift_code = swift_code


class RecordAlreadyExistsError(DirectoryException):
    """Raised when adding a SWIFT code that is already stored."""
    status_code = 409
    error_code = "record_already_exists"

    def __init__(self, swift_code: str):
        super().__init__(
            message=f"The SWIFT code {swift_code} already exists",
            details=f"swift_code={swift_code}"
        )
        self.swift_code = swift_code


class StoreError(DirectoryException):
    """Raised when the record store backend fails."""
    status_code = 503
    error_code = "store_error"

    def __init__(self, message: str = "Record store operation failed"):
        super().__init__(message)


class AggregationCancelledError(DirectoryException):
    """
    Raised when the request context is canceled or past its deadline
    before the branch/country fan-out is dispatched.
    """
    status_code = 504
    error_code = "aggregation_cancelled"

    def __init__(self, reason: str = "context canceled"):
        super().__init__(
            message=f"Aggregation aborted: {reason}",
            details=f"reason={reason}"
        )
        self.reason = reason

"""
Custom exception hierarchy for the application.

Provides specific exception types so callers can tell an unreadable document
from a technical failure or a duplicate upload.
"""

from typing import Any, Optional

NO_DIAGNOSTIC_MESSAGE = "engine returned no diagnostic information"


class InvoiceProcessingError(Exception):
    """Base exception for all invoice processing errors."""
    pass


class ConfigurationError(InvoiceProcessingError):
    """Raised when a required setting (e.g. an API credential) is missing."""
    pass


class AcquisitionError(InvoiceProcessingError):
    """Raised when no text could be obtained from a document."""
    pass


class APIError(AcquisitionError):
    """Raised when the remote OCR service call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, response: Optional[dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class InsufficientSignalError(InvoiceProcessingError):
    """Raised when the parsed invoice has no usable identifying fields."""
    pass


class DuplicateInvoiceError(InvoiceProcessingError):
    """Raised when a parsed invoice matches an already registered one."""

    def __init__(self, message: str, existing: Any = None, existing_id: Optional[str] = None):
        super().__init__(message)
        self.existing = existing
        self.existing_id = existing_id


def describe_exception(error: BaseException) -> str:
    """Return the exception message, never an empty string."""
    message = str(error).strip()
    return message or NO_DIAGNOSTIC_MESSAGE

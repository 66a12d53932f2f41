"""
Core module providing foundational components for the application.

Includes interfaces, exceptions, and result objects.
"""

from .interfaces import ITextSource, IStructuredExtractor, IValidator
from .exceptions import (
    InvoiceProcessingError,
    ConfigurationError,
    AcquisitionError,
    APIError,
    InsufficientSignalError,
    DuplicateInvoiceError,
)
from .results import Result

__all__ = [
    'ITextSource',
    'IStructuredExtractor',
    'IValidator',
    'InvoiceProcessingError',
    'ConfigurationError',
    'AcquisitionError',
    'APIError',
    'InsufficientSignalError',
    'DuplicateInvoiceError',
    'Result',
]

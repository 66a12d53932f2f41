"""
Services module for business logic orchestration.

Provides service layer for clean separation of concerns.
"""

from .acquisition_service import AcquisitionService, build_structured_extractor, build_text_sources
from .invoice_service import InvoiceService
from .processing_service import ProcessingService

__all__ = [
    'AcquisitionService',
    'build_structured_extractor',
    'build_text_sources',
    'InvoiceService',
    'ProcessingService',
]

"""
Clients module for external recognition services.
"""

from .ocr_space_client import OCRSpaceClient, RemoteTextSource
from .gemini_client import GeminiInvoiceExtractor

__all__ = [
    'OCRSpaceClient',
    'RemoteTextSource',
    'GeminiInvoiceExtractor',
]

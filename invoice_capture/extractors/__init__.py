"""
Extractors module for invoice field extraction.
"""

from .base import BaseExtractor
from .invoice_parser import InvoiceTextParser

__all__ = [
    'BaseExtractor',
    'InvoiceTextParser',
]

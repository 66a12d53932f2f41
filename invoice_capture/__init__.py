"""
Invoice capture engine for community project expense tracking.

Reads Venezuelan invoices (images and PDFs), recognizes their text locally
or through OCR.space, and extracts date, RIF, invoice number, supplier,
description and total.
"""

from .models import RawDocument, InvoiceCandidate

__version__ = "1.0.0"

__all__ = [
    'RawDocument',
    'InvoiceCandidate',
]

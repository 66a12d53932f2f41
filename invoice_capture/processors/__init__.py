"""
Processors module for document loading and local text acquisition.
"""

from .document_processor import DocumentProcessor, guess_media_type
from .text_acquisition import LocalTextExtractor

__all__ = [
    'DocumentProcessor',
    'guess_media_type',
    'LocalTextExtractor',
]

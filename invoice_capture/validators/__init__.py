"""
Validators module for parsed invoices.

Provides the minimal-signal check and duplicate detection.
"""

from .signal_validator import SignalValidator
from .duplicate_guard import DuplicateGuard, normalize_key

__all__ = [
    'SignalValidator',
    'DuplicateGuard',
    'normalize_key',
]

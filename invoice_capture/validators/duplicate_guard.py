"""
Duplicate Guard.

Detects invoices that were already registered, comparing RIF and invoice
number after normalization so formatting differences do not hide a match.
"""

import re
from typing import Any, Iterable, Optional
from collections.abc import Mapping
from ..core.logging_config import get_logger

logger = get_logger(__name__)

_NON_ALPHANUMERIC = re.compile(r'[^A-Z0-9]')

TAX_ID_FIELDS = ('tax_id', 'taxId', 'rif')
INVOICE_NUMBER_FIELDS = ('invoice_number', 'invoiceNumber')
ID_FIELDS = ('id',)


def _normalize_standard(value: Optional[str]) -> str:
    return _NON_ALPHANUMERIC.sub('', (value or '').strip().upper())


def normalize_key(tax_id: Optional[str], invoice_number: Optional[str]) -> str:
    """
    Build the comparison key for an invoice.

    Both parts are uppercased and stripped of every non-alphanumeric
    character; leading zeros are removed from the invoice number.

    >>> normalize_key("j.12345678.9", "00123")
    'J123456789|123'
    """
    return f"{_normalize_standard(tax_id)}|{_normalize_standard(invoice_number).lstrip('0')}"


def _read_field(record: Any, names: Iterable[str]) -> Optional[str]:
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def record_key(record: Any) -> str:
    """Comparison key of a stored invoice (object or mapping)."""
    return normalize_key(
        _read_field(record, TAX_ID_FIELDS),
        _read_field(record, INVOICE_NUMBER_FIELDS)
    )


def record_id(record: Any) -> Optional[str]:
    """Identifier of a stored invoice, if it has one."""
    value = _read_field(record, ID_FIELDS)
    return str(value) if value is not None else None


class DuplicateGuard:
    """
    Checks a new invoice against the invoices already registered.
    """

    def find_duplicate(self, candidate: Any, existing: Iterable[Any]) -> Optional[Any]:
        """
        Find the registered invoice that conflicts with the candidate.

        Args:
            candidate: Newly parsed invoice
            existing: Registered invoices (objects or mappings)

        Returns:
            The first conflicting record, or None
        """
        key = record_key(candidate)
        logger.debug(f"Checking duplicates for key {key}")

        for record in existing:
            if record_key(record) == key:
                logger.info(f"Duplicate invoice detected (existing id: {record_id(record)})")
                return record

        return None

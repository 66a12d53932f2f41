"""
Signal Validator.

Decides whether a parsed invoice carries enough information to be useful.
"""

from typing import Any
from ..core.logging_config import get_logger
from ..core.interfaces import IValidator
from ..models import InvoiceCandidate

logger = get_logger(__name__)


class SignalValidator(IValidator):
    """
    Rejects candidates parsed from documents that could not be read at all.

    A candidate is unusable only when it has no RIF, no invoice number found
    in the text (the synthetic OCR-xxxxxx placeholder does not count) and a
    zero total. Any one of the three is enough to keep it.
    """

    def validate(self, data: Any) -> bool:
        """
        Check the minimal-signal rule.

        Args:
            data: InvoiceCandidate to check

        Returns:
            True if the candidate has at least one identifying field
        """
        if not isinstance(data, InvoiceCandidate):
            return False

        has_tax_id = bool(data.tax_id.strip())
        has_invoice_number = data.invoice_number_matched and bool(data.invoice_number.strip())
        has_total = data.total_amount != 0

        if not (has_tax_id or has_invoice_number or has_total):
            logger.info("Signal validation failed: no RIF, invoice number or total found")
            return False

        return True

    @staticmethod
    def describe_failure() -> str:
        """Message shown to the user when validation fails."""
        return (
            "Could not read the invoice: no RIF, invoice number or total amount was found. "
            "Try again with a sharper photo or scan."
        )

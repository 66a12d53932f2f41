"""
Invoice Text Parser.

Turns noisy OCR text from Venezuelan invoices into structured fields using
regex patterns and positional heuristics. Parsing is best effort: a field
that cannot be found falls back to its default instead of raising.
"""

from datetime import datetime
from typing import Callable, List, Optional
from .base import BaseExtractor
from ..config.patterns import PatternConfig
from ..core.logging_config import get_logger
from ..models import (
    InvoiceCandidate,
    DEFAULT_SUPPLIER_NAME,
    DEFAULT_ITEMS_DESCRIPTION,
    SYNTHETIC_INVOICE_PREFIX,
)

logger = get_logger(__name__)

# Accepted year window for invoice dates (exclusive bounds)
MIN_YEAR = 2000
MAX_YEAR = 2030

SUPPLIER_SCAN_LINES = 15
SUPPLIER_FALLBACK_LINES = 5
MIN_SUPPLIER_LENGTH = 5
MIN_ITEM_LINE_LENGTH = 10


class InvoiceTextParser(BaseExtractor):
    """
    Extracts invoice fields from recognized text.

    Stateless apart from the injectable clock used for the synthetic invoice
    number and the year false-positive guard.
    """

    def __init__(
        self,
        patterns: Optional[PatternConfig] = None,
        now: Callable[[], datetime] = datetime.now
    ):
        """
        Initialize the parser.

        Args:
            patterns: Optional pattern configuration (global one if None)
            now: Clock used for the synthetic invoice number and year guard
        """
        super().__init__(patterns)
        self._now = now

    def parse(self, text: Optional[str]) -> InvoiceCandidate:
        """Parse raw text into an InvoiceCandidate. Never raises on bad input."""
        return self.extract_all_fields(text)

    def extract_all_fields(self, ocr_text: Optional[str] = None) -> InvoiceCandidate:
        """
        Extract all fields from OCR text.

        Args:
            ocr_text: Raw OCR text from the invoice (may be empty)

        Returns:
            InvoiceCandidate with every field populated or defaulted
        """
        text = ocr_text or ''
        clean_text = self._normalize_text(text)
        lines = self._split_lines(text)

        invoice_number = self.match_invoice_number(clean_text)
        supplier_name = self.match_supplier_name(lines) or DEFAULT_SUPPLIER_NAME

        candidate = InvoiceCandidate(
            invoice_date=self.match_date(clean_text) or '',
            supplier_name=supplier_name,
            tax_id=self.match_tax_id(clean_text) or '',
            invoice_number=invoice_number or self._synthetic_invoice_number(),
            items_description=self.match_items_description(lines, supplier_name) or DEFAULT_ITEMS_DESCRIPTION,
            total_amount=self.match_total_amount(clean_text) or 0.0,
            invoice_number_matched=invoice_number is not None,
        )
        self.logger.debug(f"Parsed invoice candidate: {candidate}")
        return candidate

    def match_tax_id(self, clean_text: str) -> Optional[str]:
        """
        Find the supplier RIF and normalize it to ``L-DIGITS-D``.

        Accepts dashes, dots, spaces or no separator between the groups:
        J-12345678-9, J.12345678.9, J 12345678 9 and J123456789 all give
        J-12345678-9.
        """
        match = self.patterns.get_tax_id_pattern().search(clean_text)
        if not match:
            return None
        letter, digits, check = match.groups()
        return f"{letter.upper()}-{digits}-{check}"

    def match_date(self, clean_text: str) -> Optional[str]:
        """
        Find the first DD-MM-YY[YY] token and return it as ISO YYYY-MM-DD.

        The first group is always taken as the day and the second as the
        month. Years outside the open interval (2000, 2030) are rejected.
        """
        match = self.patterns.get_date_pattern().search(clean_text)
        if not match:
            return None

        day, month, year = match.groups()
        if len(year) == 2:
            year = f"20{year}"

        if not MIN_YEAR < int(year) < MAX_YEAR:
            logger.debug(f"Discarding date {match.group(0)!r}: year {year} out of range")
            return None

        return f"{year}-{month}-{day}"

    def match_invoice_number(self, clean_text: str) -> Optional[str]:
        """
        Find the invoice or control number.

        Labelled numbers (FACTURA, CONTROL, NRO, ...) take priority over bare
        "N° 12345" markers. A bare current or previous year is treated as a
        false positive and replaced by the first standalone 5+ digit run.

        Returns:
            The cleaned number, or None when nothing usable is found
        """
        candidate = ''
        for pattern in self.patterns.get_invoice_number_patterns():
            match = pattern.search(clean_text)
            if match:
                candidate = self.patterns.edge_noise_pattern.sub('', match.group(1))
                break

        if self._is_recent_year(candidate):
            logger.debug(f"Invoice number {candidate!r} looks like a year, searching for a longer number")
            replacement = self.patterns.standalone_number_pattern.search(clean_text)
            candidate = replacement.group(0) if replacement else ''

        if len(candidate) < 2:
            return None
        return candidate

    def match_total_amount(self, clean_text: str) -> Optional[float]:
        """
        Return the largest currency-shaped number in the text.

        The grand total is assumed to be the largest amount on the page.
        """
        amounts = [
            self._parse_amount(token)
            for token in self.patterns.get_money_pattern().findall(clean_text)
        ]
        if not amounts:
            return None
        return max(amounts)

    def match_supplier_name(self, lines: List[str]) -> Optional[str]:
        """
        Find the issuing company name.

        Strategies, first hit wins:
        1. The line right below the SENIAT letterhead
        2. A line among the first 15 carrying a legal suffix (C.A., S.A., ...)
        3. The first meaningful line among the first 5
        """
        return (
            self._supplier_below_tax_authority(lines)
            or self._supplier_with_legal_suffix(lines)
            or self._supplier_from_first_lines(lines)
        )

    def _supplier_below_tax_authority(self, lines: List[str]) -> Optional[str]:
        authority = self.patterns.tax_authority_term
        for index, line in enumerate(lines):
            if authority not in line.upper():
                continue
            if index + 1 >= len(lines):
                return None
            following = lines[index + 1]
            upper = following.upper()
            if len(following) > MIN_SUPPLIER_LENGTH and 'RIF' not in upper and 'FACTURA' not in upper:
                return following
            return None
        return None

    def _supplier_with_legal_suffix(self, lines: List[str]) -> Optional[str]:
        for line in lines[:SUPPLIER_SCAN_LINES]:
            upper = line.upper()
            if self.patterns.tax_authority_term in upper:
                continue
            if not self.patterns.legal_suffix_pattern.search(upper):
                continue
            if (self.patterns.generic_category_pattern.search(upper)
                    and not self.patterns.legal_suffix_at_end_pattern.search(upper)):
                continue
            return line
        return None

    def _supplier_from_first_lines(self, lines: List[str]) -> Optional[str]:
        for line in lines[:SUPPLIER_FALLBACK_LINES]:
            upper = line.upper()
            if len(line) <= MIN_SUPPLIER_LENGTH:
                continue
            if any(term in upper for term in self.patterns.letterhead_terms):
                continue
            if self.patterns.generic_category_pattern.search(upper):
                continue
            return line
        return None

    def match_items_description(self, lines: List[str], supplier_name: str) -> Optional[str]:
        """
        Pick a line that describes what was bought.

        Skips metadata lines (SENIAT, RIF, FACTURA, CONTROL), date lines and
        short lines, and prefers one that is not the supplier name.
        """
        candidates = [
            line for line in lines
            if len(line) > MIN_ITEM_LINE_LENGTH
            and not any(term in line.upper() for term in self.patterns.metadata_terms)
            and not self.patterns.get_date_pattern().search(line)
        ]
        if not candidates:
            return None

        supplier = supplier_name.upper()
        for line in candidates:
            upper = line.upper()
            if upper != supplier and supplier not in upper:
                return line
        return candidates[0]

    def _is_recent_year(self, candidate: str) -> bool:
        if len(candidate) != 4 or not candidate.isdigit():
            return False
        current_year = self._now().year
        return int(candidate) in (current_year, current_year - 1)

    def _synthetic_invoice_number(self) -> str:
        millis = int(self._now().timestamp() * 1000)
        return f"{SYNTHETIC_INVOICE_PREFIX}{str(millis)[-6:]}"

"""
Unit tests for invoice number extraction.
"""

import re
from datetime import datetime

import pytest
from invoice_capture.extractors.invoice_parser import InvoiceTextParser

FIXED_NOW = datetime(2026, 10, 17, 12, 30, 0)


class TestInvoiceNumberExtraction:
    """Test cases for labelled, bare and synthetic invoice numbers."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = InvoiceTextParser(now=lambda: FIXED_NOW)

    @pytest.mark.parametrize("text, expected", [
        ("FACTURA N° 000123", "000123"),
        ("FACTURA Nº 000123", "000123"),
        ("Factura: A-2345", "A-2345"),
        ("NRO. CONTROL: 00-004567", "00-004567"),
        ("NOTA: 8812", "8812"),
        ("NUMERO: 55431", "55431"),
        ("NO. 98765", "98765"),
    ])
    def test_labelled_number(self, text, expected):
        """Test numbers that follow a known label."""
        candidate = self.parser.parse(text)
        assert candidate.invoice_number == expected
        assert candidate.invoice_number_matched is True

    def test_bare_marker_number(self):
        """A bare N° marker is used when no label matches."""
        candidate = self.parser.parse("TICKET\nNº 4567-89")
        assert candidate.invoice_number == "4567-89"

    def test_edge_punctuation_is_stripped(self):
        """Leading and trailing punctuation is removed from the number."""
        candidate = self.parser.parse("NRO: -123-")
        assert candidate.invoice_number == "123"

    def test_label_without_digits_is_ignored(self):
        """A label followed by words is not a number."""
        candidate = self.parser.parse("FACTURA\nGRACIAS POR SU COMPRA")
        assert candidate.invoice_number_matched is False

    def test_current_year_is_replaced_by_long_number(self):
        """A number equal to the current year is a false positive."""
        candidate = self.parser.parse("FACTURA 2026\nTICKET 0045821")
        assert candidate.invoice_number == "0045821"

    def test_previous_year_is_replaced_by_long_number(self):
        """A number equal to last year is a false positive too."""
        candidate = self.parser.parse("FACTURA 2025\nREF 7731290")
        assert candidate.invoice_number == "7731290"

    def test_older_year_is_kept(self):
        """Only the current and previous year are treated as years."""
        candidate = self.parser.parse("FACTURA 2019")
        assert candidate.invoice_number == "2019"

    def test_year_without_replacement_falls_back_to_synthetic(self):
        """With no longer number available the synthetic number is used."""
        candidate = self.parser.parse("FACTURA 2026")
        assert candidate.invoice_number.startswith("OCR-")
        assert candidate.invoice_number_matched is False

    @pytest.mark.parametrize("text", ["", "   \n  ", "GRACIAS POR SU COMPRA"])
    def test_synthetic_number_is_never_empty(self, text):
        """Missing numbers get an OCR-xxxxxx placeholder."""
        candidate = self.parser.parse(text)
        expected_suffix = str(int(FIXED_NOW.timestamp() * 1000))[-6:]
        assert re.fullmatch(r"OCR-\d{6}", candidate.invoice_number)
        assert candidate.invoice_number == f"OCR-{expected_suffix}"
        assert candidate.invoice_number_matched is False

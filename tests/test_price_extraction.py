"""
Unit tests for total amount extraction.
"""

import math

import pytest
from invoice_capture.extractors.invoice_parser import InvoiceTextParser
from invoice_capture.extractors.base import BaseExtractor


class TestPriceExtraction:
    """Test cases for monetary amount parsing and total selection."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = InvoiceTextParser()

    @pytest.mark.parametrize("text, expected", [
        ("TOTAL A PAGAR Bs. 26.623,32", 26623.32),
        ("Total: 1,234.56", 1234.56),
        ("TOTAL 1000,00", 1000.00),
        ("TOTAL 1.000,00", 1000.00),
        ("TOTAL 99.90", 99.90),
        ("TOTAL 1.234.567,89", 1234567.89),
        ("TOTAL 1,234,567.89", 1234567.89),
    ])
    def test_locale_resolution(self, text, expected):
        """Test Venezuelan and US separator conventions."""
        assert self.parser.parse(text).total_amount == pytest.approx(expected)

    def test_largest_amount_is_the_total(self):
        """The largest currency-shaped figure is reported."""
        text = "SUBTOTAL 100,00\nTOTAL 26.623,32"
        assert self.parser.parse(text).total_amount == pytest.approx(26623.32)

    def test_largest_amount_regardless_of_position(self):
        """Order in the text does not matter."""
        text = "TOTAL 26.623,32\nVUELTO 100,00\nEFECTIVO 30.000,00"
        assert self.parser.parse(text).total_amount == pytest.approx(30000.00)

    def test_no_amount_defaults_to_zero(self):
        """Test handling when no amount is present."""
        assert self.parser.parse("SIN MONTOS 12 34").total_amount == 0

    def test_amount_is_never_negative_or_nan(self):
        """A leading minus sign is not part of the amount."""
        amount = self.parser.parse("DESCUENTO -150,00").total_amount
        assert amount == pytest.approx(150.00)
        assert not math.isnan(amount)

    @pytest.mark.parametrize("token, expected", [
        ("26.623,32", 26623.32),
        ("1,234.56", 1234.56),
        ("100,00", 100.0),
        ("0.50", 0.5),
    ])
    def test_parse_amount_token(self, token, expected):
        """Test the token converter directly."""
        assert BaseExtractor._parse_amount(token) == pytest.approx(expected)

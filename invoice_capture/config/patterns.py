"""
Regex pattern definitions.

Centralizes all regex patterns used for invoice field extraction. Patterns
run against the whitespace-collapsed, uppercased copy of the text unless
noted otherwise.
"""

import re
from typing import List, Pattern, Optional


class PatternConfig:
    """
    Configuration for regex patterns.

    Compiles patterns once for performance.
    """

    def __init__(self):
        """Initialize and compile all patterns."""
        # RIF: J-12345678-9, J123456789, J.12345678.9, J 12345678 9
        self.tax_id_pattern = re.compile(r'\b([VJEPG])[-.\s]?(\d{5,9})[-.\s]?(\d)\b', re.IGNORECASE)

        # DD-MM-YYYY, DD/MM/YY, DD.MM.YYYY, DD MM YYYY
        self.date_pattern = re.compile(r'\b(\d{2})[-/.\s](\d{2})[-/.\s](\d{2,4})\b')

        # Invoice number patterns, tried in order
        self.invoice_number_patterns = [
            # Label followed by symbol noise and a run with at least 2 consecutive digits
            re.compile(
                r'\b(?:FACTURA|CONTROL|NOTA|FISCAL|NRO|NUMERO|NO\.)[\s.:°º#]*(?:N[°º.]\s*)?'
                r'([A-Z0-9\-/]*\d{2}[A-Z0-9\-/]*)',
                re.IGNORECASE
            ),
            # Bare "N° 12345" marker
            re.compile(r'\bN[°º.]?\s*([\d\-/]{4,})', re.IGNORECASE),
        ]
        self.standalone_number_pattern = re.compile(r'\b\d{5,}\b')
        self.edge_noise_pattern = re.compile(r'^[^A-Z0-9]+|[^A-Z0-9]+$', re.IGNORECASE)

        # 1.234,56 / 1,234.56 / 1234,56 / 100.00
        self.money_pattern = re.compile(r'\b(?:\d{1,3}(?:[.,]\d{3})+|\d+)[.,]\d{2}\b')

        # Supplier heuristics (applied to single uppercased lines)
        self.legal_suffix_pattern = re.compile(
            r'\bC\.\s?A\b|\bS\.\s?A\b|\bS\.\s?R\.\s?L\b|\bFIRMA PERSONAL\b'
        )
        self.legal_suffix_at_end_pattern = re.compile(
            r'(?:\bC\.\s?A|\bS\.\s?A|\bS\.\s?R\.\s?L|\bFIRMA PERSONAL)\.?\s*$'
        )
        self.generic_category_pattern = re.compile(
            r'\b(?:MATERIALES|CONSTRUCCI[OÓ]N(?:ES)?|REPUESTOS|SERVICIOS)\b'
        )

        # Terms that never belong to the supplier or item lines
        self.tax_authority_term = 'SENIAT'
        self.letterhead_terms = ['SENIAT', 'REPÚBLICA', 'REPUBLICA', 'FACTURA']
        self.metadata_terms = ['SENIAT', 'RIF', 'FACTURA', 'CONTROL']

    def get_tax_id_pattern(self) -> Pattern:
        """Get compiled RIF pattern."""
        return self.tax_id_pattern

    def get_date_pattern(self) -> Pattern:
        """Get compiled date pattern."""
        return self.date_pattern

    def get_invoice_number_patterns(self) -> List[Pattern]:
        """Get compiled invoice number patterns in priority order."""
        return self.invoice_number_patterns

    def get_money_pattern(self) -> Pattern:
        """Get compiled monetary amount pattern."""
        return self.money_pattern


# Global pattern config instance
_patterns: Optional[PatternConfig] = None


def get_patterns() -> PatternConfig:
    """Get the global pattern configuration instance."""
    global _patterns
    if _patterns is None:
        _patterns = PatternConfig()
    return _patterns


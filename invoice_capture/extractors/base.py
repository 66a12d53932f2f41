"""
Base extractor classes.

Provides the abstract base class for text extractors along with the text
normalization helpers they share.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import re
from ..config.patterns import get_patterns, PatternConfig
from ..core.logging_config import get_logger
from ..models import InvoiceCandidate

_WHITESPACE = re.compile(r'\s+')


class BaseExtractor(ABC):
    """
    Abstract base class for all extractors.

    Provides common functionality and defines the interface.
    """

    def __init__(self, patterns: Optional[PatternConfig] = None):
        """Initialize base extractor with patterns."""
        self.patterns = patterns or get_patterns()
        self.logger = get_logger(self.__class__.__name__)

    @abstractmethod
    def extract_all_fields(self, ocr_text: Optional[str] = None) -> InvoiceCandidate:
        """
        Extract all invoice fields.

        Args:
            ocr_text: Raw recognized text

        Returns:
            InvoiceCandidate with every field populated or defaulted
        """
        pass

    @staticmethod
    def _normalize_text(text: str) -> str:
        """Collapse whitespace and uppercase, for pattern matching."""
        return _WHITESPACE.sub(' ', text or '').strip().upper()

    @staticmethod
    def _split_lines(text: str) -> List[str]:
        """Split into trimmed lines, dropping blank ones, for positional heuristics."""
        return [line.strip() for line in (text or '').splitlines() if line.strip()]

    @staticmethod
    def _parse_amount(token: str) -> float:
        """
        Convert a grouped decimal token into a float.

        The separator three characters from the end is the decimal separator;
        every other '.' or ',' is a thousands separator. This covers
        1.234,56 (Venezuelan), 1,234.56 (US), 1234,56 and 1234.56.

        Args:
            token: Matched monetary token, e.g. "26.623,32"

        Returns:
            The amount as a float
        """
        integer_part = re.sub(r'[.,]', '', token[:-3])
        return float(f"{integer_part}.{token[-2:]}")

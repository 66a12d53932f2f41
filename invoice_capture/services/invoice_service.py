"""
Invoice Service.

Orchestrates invoice capture: optional structured extraction, text
acquisition, field parsing, minimal-signal validation and duplicate
detection.
"""

from typing import Any, Iterable, Optional
from .acquisition_service import AcquisitionService
from ..extractors.invoice_parser import InvoiceTextParser
from ..validators.signal_validator import SignalValidator
from ..validators.duplicate_guard import DuplicateGuard, record_id
from ..core.exceptions import (
    AcquisitionError,
    DuplicateInvoiceError,
    InsufficientSignalError,
    describe_exception,
)
from ..core.interfaces import IStructuredExtractor
from ..core.logging_config import get_logger
from ..core.results import Result
from ..models import InvoiceCandidate, RawDocument

logger = get_logger(__name__)


class InvoiceService:
    """
    Service for capturing invoices.

    Returns a Result whose failure carries one of AcquisitionError,
    InsufficientSignalError or DuplicateInvoiceError.
    """

    def __init__(
        self,
        acquisition_service: Optional[AcquisitionService] = None,
        parser: Optional[InvoiceTextParser] = None,
        signal_validator: Optional[SignalValidator] = None,
        duplicate_guard: Optional[DuplicateGuard] = None,
        structured_extractor: Optional[IStructuredExtractor] = None
    ):
        """
        Initialize invoice service.

        Args:
            acquisition_service: Optional acquisition service (default chain if None)
            parser: Optional text parser (creates default if None)
            signal_validator: Optional signal validator (creates default if None)
            duplicate_guard: Optional duplicate guard (creates default if None)
            structured_extractor: Optional engine tried before the text chain
        """
        self._acquisition_service = acquisition_service
        self.parser = parser or InvoiceTextParser()
        self.signal_validator = signal_validator or SignalValidator()
        self.duplicate_guard = duplicate_guard or DuplicateGuard()
        self.structured_extractor = structured_extractor

    @property
    def acquisition_service(self) -> AcquisitionService:
        # Built lazily so text-only callers need no OCR configuration
        if self._acquisition_service is None:
            self._acquisition_service = AcquisitionService()
        return self._acquisition_service

    def process_document(
        self,
        document: RawDocument,
        existing_invoices: Iterable[Any] = ()
    ) -> Result[InvoiceCandidate]:
        """
        Capture an invoice from an uploaded document.

        The structured extractor, when configured, is tried first; a
        technical failure there falls back to text acquisition and parsing.

        Args:
            document: Uploaded document
            existing_invoices: Invoices already registered for the project

        Returns:
            Result with the InvoiceCandidate
        """
        logger.info(f"Processing document: {document.filename or 'document'} ({document.media_type})")

        structured = self._extract_structured(document)
        if structured is not None:
            if structured.is_failure():
                return structured
            return self._check(structured.get_value(), existing_invoices)

        text_result = self.acquisition_service.acquire(document)
        if text_result.is_failure():
            logger.error(f"Text acquisition failed for {document.filename}: {text_result.get_error()}")
            return Result.from_exception(text_result.get_exception())

        return self.process_text(text_result.get_value(), existing_invoices)

    def process_text(
        self,
        text: str,
        existing_invoices: Iterable[Any] = ()
    ) -> Result[InvoiceCandidate]:
        """
        Parse already recognized text and gate the result.

        Args:
            text: Raw recognized text
            existing_invoices: Invoices already registered for the project

        Returns:
            Result with the parsed InvoiceCandidate
        """
        candidate = self.parser.parse(text)

        if not self.signal_validator.validate(candidate):
            return Result.from_exception(InsufficientSignalError(self.signal_validator.describe_failure()))

        return self._check(candidate, existing_invoices)

    def _extract_structured(self, document: RawDocument) -> Optional[Result[InvoiceCandidate]]:
        """Run the structured extractor; None means fall back to the text chain."""
        if self.structured_extractor is None:
            return None

        name = self.structured_extractor.name
        try:
            candidate = self.structured_extractor.extract_invoice(document)
        except InsufficientSignalError as e:
            logger.info(f"Structured extraction '{name}' found no essential data: {e}")
            return Result.from_exception(e)
        except AcquisitionError as e:
            logger.warning(f"Structured extraction '{name}' failed, using text sources: {describe_exception(e)}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error in structured extraction '{name}': {describe_exception(e)}", exc_info=True)
            return None

        logger.info(f"Invoice fields obtained from '{name}'")
        return Result.success_result(candidate)

    def _check(
        self,
        candidate: InvoiceCandidate,
        existing_invoices: Iterable[Any]
    ) -> Result[InvoiceCandidate]:
        duplicate = self.duplicate_guard.find_duplicate(candidate, existing_invoices)
        if duplicate is not None:
            return Result.from_exception(DuplicateInvoiceError(
                f'Duplicate invoice: invoice number "{candidate.invoice_number}" '
                f'for supplier RIF "{candidate.tax_id}" is already registered.',
                existing=duplicate,
                existing_id=record_id(duplicate)
            ))

        logger.info(
            f"Captured invoice {candidate.invoice_number} from {candidate.supplier_name} "
            f"(RIF {candidate.tax_id or 'n/a'}, total {candidate.total_amount:.2f})"
        )
        return Result.success_result(candidate)

"""
Interface definitions using Python Protocols.

Text sources (remote OCR service, local pdfplumber/Tesseract) and validators
are matched structurally, so a new recognition engine only needs a ``name``
and an ``extract_text`` method to join the acquisition chain.
"""

from typing import Protocol, Any, runtime_checkable

from ..models import InvoiceCandidate, RawDocument


@runtime_checkable
class ITextSource(Protocol):
    """
    Protocol for anything that turns a document into raw text.

    Implementations:
    - RemoteTextSource: OCR.space web service
    - LocalTextExtractor: pdfplumber text layer with Tesseract fallback

    Implementations raise AcquisitionError (or a subclass) on failure and
    must never return None.
    """

    name: str

    def extract_text(self, document: RawDocument) -> str:
        """Return every piece of text recoverable from the document."""
        ...


@runtime_checkable
class IStructuredExtractor(Protocol):
    """
    Protocol for engines that read invoice fields straight from a document.

    Implementations:
    - GeminiInvoiceExtractor: Google Gemini structured output

    Technical failures raise AcquisitionError (or a subclass) so the caller
    can fall back to the text sources.
    """

    name: str

    def extract_invoice(self, document: RawDocument) -> InvoiceCandidate:
        """Return the invoice fields found in the document."""
        ...


@runtime_checkable
class IValidator(Protocol):
    """
    Protocol defining the contract for validator classes.

    Implementations:
    - SignalValidator: checks a parsed invoice has usable identifying fields
    """

    def validate(self, data: Any) -> bool:
        """
        Validate data according to the validator's rules.

        Args:
            data: The data to validate

        Returns:
            True if the data is valid according to the validator's rules,
            False otherwise
        """
        ...

"""
Data model for invoice capture.

RawDocument is what the caller uploads; InvoiceCandidate is what the parser
produces. Both are immutable.
"""

from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_SUPPLIER_NAME = "Proveedor Desconocido"
DEFAULT_ITEMS_DESCRIPTION = "Gasto procesado automáticamente (OCR)"
SYNTHETIC_INVOICE_PREFIX = "OCR-"

PDF_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class RawDocument:
    """An uploaded document: bytes plus the declared media type."""

    content: bytes
    media_type: str
    filename: str = ""

    @property
    def is_pdf(self) -> bool:
        return self.media_type.lower() == PDF_MEDIA_TYPE

    @property
    def is_image(self) -> bool:
        return self.media_type.lower().startswith("image/")

    def __repr__(self) -> str:
        return (
            f"RawDocument(filename={self.filename!r}, media_type={self.media_type!r}, "
            f"size={len(self.content)})"
        )


@dataclass(frozen=True)
class InvoiceCandidate:
    """
    Structured invoice fields parsed from recognized text.

    invoice_number and items_description are never empty; total_amount is
    never negative. invoice_number_matched is False when invoice_number is
    the synthetic ``OCR-xxxxxx`` placeholder.
    """

    invoice_date: str = ""
    supplier_name: str = DEFAULT_SUPPLIER_NAME
    tax_id: str = ""
    invoice_number: str = ""
    items_description: str = DEFAULT_ITEMS_DESCRIPTION
    total_amount: float = 0.0
    invoice_number_matched: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the field names of the stored invoice records."""
        return {
            'invoiceDate': self.invoice_date,
            'supplierName': self.supplier_name,
            'rif': self.tax_id,
            'invoiceNumber': self.invoice_number,
            'itemsDescription': self.items_description,
            'totalAmount': self.total_amount,
        }

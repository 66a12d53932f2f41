"""
Gemini Client Module

Structured invoice extraction with Google Gemini. The document is sent as
inline data together with a prompt asking for the six invoice fields as a
JSON object, which is then mapped onto an InvoiceCandidate.
"""

import json
import math
import re
from typing import Any, Dict, Optional
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from ..config.settings import get_settings, Settings
from ..core.exceptions import APIError, ConfigurationError, InsufficientSignalError
from ..core.logging_config import get_logger
from ..core.retry import retry, CircuitBreaker
from ..extractors.invoice_parser import InvoiceTextParser
from ..models import (
    InvoiceCandidate,
    RawDocument,
    DEFAULT_SUPPLIER_NAME,
    DEFAULT_ITEMS_DESCRIPTION,
)

logger = get_logger(__name__)

REQUIRED_FIELDS = ('invoiceDate', 'supplierName', 'rif', 'invoiceNumber', 'itemsDescription', 'totalAmount')

# Fields without which an invoice cannot be registered, with their display names
ESSENTIAL_FIELDS = (('rif', 'RIF'), ('invoiceNumber', 'invoice number'))

EXTRACTION_PROMPT = """
Eres un asistente experto en facturas venezolanas.
Analiza la imagen o documento PDF proporcionado.
RESPONDE ÚNICAMENTE con un JSON válido, sin texto adicional.
Extrae EXACTAMENTE estos campos como JSON:
{
  "invoiceDate": "AAAA-MM-DD",
  "supplierName": "nombre del proveedor",
  "rif": "con formato como J-12345678-9",
  "invoiceNumber": "número de factura",
  "itemsDescription": "descripción de los ítems",
  "totalAmount": número, sin símbolos de moneda
}
""".strip()

_JSON_BLOCK = re.compile(r'\{.*\}', re.DOTALL)
_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def _as_text(value: Any) -> str:
    return str(value).strip() if value is not None else ''


def _as_amount(value: Any) -> float:
    # Only real numbers are accepted, as the prompt asks for a bare number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


class GeminiInvoiceExtractor:
    """
    Extracts invoice fields directly from a document with Gemini.

    Technical failures (request errors, malformed or incomplete JSON) raise
    APIError so the caller can fall back to the OCR text chain. A response
    without RIF or invoice number raises InsufficientSignalError naming the
    missing fields.
    """

    name = 'gemini'

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[Any] = None
    ):
        """
        Initialize the extractor.

        Args:
            api_key: Gemini API key (falls back to GEMINI_API_KEY)
            model: Model name (falls back to GEMINI_MODEL)
            settings: Optional settings instance
            client: Optional ``genai.Client`` (useful for testing)

        Raises:
            ConfigurationError: If no API key is configured
        """
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.gemini_api_key

        if not self.api_key:
            raise ConfigurationError(
                "Missing Gemini API key. Please set GEMINI_API_KEY in your .env file "
                "or disable USE_LLM_EXTRACTION."
            )

        self.model = model or self.settings.gemini_model
        self.client = client or genai.Client(api_key=self.api_key)
        self.parser = InvoiceTextParser()

        self.circuit_breaker = CircuitBreaker(
            failure_threshold=5,
            recovery_timeout=60,
            expected_exception=genai_errors.ServerError
        )

        logger.info(f"Gemini extractor initialized with model {self.model}")

    def generate_json(self, document: RawDocument) -> Dict[str, Any]:
        """
        Ask Gemini for the invoice fields of a document.

        Returns:
            The decoded JSON object, with every required field present

        Raises:
            APIError: On request errors or an unusable response
        """
        @retry(
            max_attempts=self.settings.max_retries,
            delay=self.settings.retry_delay,
            exceptions=(genai_errors.ServerError,)
        )
        def _generate():
            return self.circuit_breaker.call(
                lambda: self.client.models.generate_content(
                    model=self.model,
                    contents=[
                        types.Part.from_bytes(data=document.content, mime_type=document.media_type),
                        EXTRACTION_PROMPT,
                    ],
                    config=types.GenerateContentConfig(
                        response_mime_type='application/json',
                        temperature=0.0,
                    ),
                )
            )

        try:
            logger.info(f"Sending {document.filename or 'document'} to Gemini ({self.model})")
            response = _generate()
        except genai_errors.APIError as e:
            raise APIError(
                f"Gemini request failed: {getattr(e, 'message', None) or e}",
                status_code=getattr(e, 'code', None)
            ) from e

        raw_text = response.text
        logger.debug(f"Gemini raw response:\n{raw_text}")
        return self.parse_response_text(raw_text)

    @staticmethod
    def parse_response_text(raw_text: Optional[str]) -> Dict[str, Any]:
        """
        Decode the JSON block of a model response and check its fields.

        Raises:
            APIError: If there is no JSON object or required fields are missing
        """
        match = _JSON_BLOCK.search(raw_text or '')
        if not match:
            raise APIError("The AI did not return a JSON object")

        try:
            data = json.loads(match.group(0))
        except ValueError as e:
            raise APIError("The AI returned invalid JSON") from e

        if not isinstance(data, dict):
            raise APIError("The AI returned invalid JSON")

        missing = [field for field in REQUIRED_FIELDS if field not in data]
        if missing:
            raise APIError(f"Missing fields in the AI response: {', '.join(missing)}", response=data)

        return data

    def to_candidate(self, data: Dict[str, Any]) -> InvoiceCandidate:
        """
        Map the model's JSON onto an InvoiceCandidate.

        The RIF is normalized like parsed text, non-ISO dates are dropped and
        a total that is not a non-negative number becomes 0.0.

        Raises:
            InsufficientSignalError: If the RIF or invoice number is empty
        """
        missing = [label for field, label in ESSENTIAL_FIELDS if not _as_text(data.get(field))]
        if missing:
            raise InsufficientSignalError(
                f"The AI could not extract essential data ({' and '.join(missing)}). "
                "Make sure they are legible in the document."
            )

        raw_tax_id = _as_text(data['rif'])
        invoice_date = _as_text(data['invoiceDate'])

        return InvoiceCandidate(
            invoice_date=invoice_date if _ISO_DATE.match(invoice_date) else '',
            supplier_name=_as_text(data['supplierName']) or DEFAULT_SUPPLIER_NAME,
            tax_id=self.parser.match_tax_id(raw_tax_id.upper()) or raw_tax_id,
            invoice_number=_as_text(data['invoiceNumber']),
            items_description=_as_text(data['itemsDescription']) or DEFAULT_ITEMS_DESCRIPTION,
            total_amount=_as_amount(data['totalAmount']),
            invoice_number_matched=True,
        )

    def extract_invoice(self, document: RawDocument) -> InvoiceCandidate:
        """Extract an InvoiceCandidate from a document."""
        return self.to_candidate(self.generate_json(document))

"""
OCR.space API Client Module

Handles communication with the OCR.space recognition service to extract raw
text from invoice images and PDFs.
"""

from typing import Optional, Dict, Any
import requests
from ..core.logging_config import get_logger
from ..core.retry import retry, CircuitBreaker
from ..core.exceptions import APIError, ConfigurationError
from ..config.settings import get_settings, Settings
from ..models import RawDocument

logger = get_logger(__name__)

GENERIC_SERVICE_ERROR = "Unknown error reported by the OCR service"
EMPTY_TEXT_ERROR = "OCR service returned no text for the document"


class OCRSpaceClient:
    """
    Client for the OCR.space parse endpoint.

    Handles credentials, the multipart upload and the service's error payload.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: OCR.space API key (falls back to OCR_SPACE_API_KEY)
            endpoint: Parse endpoint URL (falls back to settings)
            timeout: HTTP timeout in seconds (falls back to settings)
            settings: Optional settings instance
            session: Optional requests session (useful for testing)

        Raises:
            ConfigurationError: If no API key is configured
        """
        self.settings = settings or get_settings()
        self.api_key = api_key or self.settings.ocr_space_api_key

        if not self.api_key:
            raise ConfigurationError(
                "Missing OCR.space API key. Please set OCR_SPACE_API_KEY in your .env file "
                "or pass api_key explicitly."
            )

        self.endpoint = endpoint or self.settings.ocr_space_endpoint
        self.timeout = timeout or self.settings.ocr_space_timeout
        self.session = session or requests.Session()

        # Opens after 5 transport failures, recovers after 60 seconds
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=5,
            recovery_timeout=60,
            expected_exception=requests.RequestException
        )

        logger.info(f"OCR.space client initialized for {self.endpoint}")

    def _build_form(self) -> Dict[str, str]:
        return {
            'apikey': self.api_key,
            'language': self.settings.ocr_space_language,
            'isOverlayRequired': 'false',
            'detectOrientation': 'true',
            'scale': 'true',
            'OCREngine': str(self.settings.ocr_space_engine),
        }

    def process_document(self, content: bytes, filename: str, media_type: str) -> Dict[str, Any]:
        """
        Upload a document to OCR.space and return the decoded JSON response.

        Transport errors are retried; persistent ones become APIError.

        Raises:
            APIError: On transport errors, HTTP errors or a body that is not a JSON object
        """
        @retry(
            max_attempts=self.settings.max_retries,
            delay=self.settings.retry_delay,
            exceptions=(requests.ConnectionError, requests.Timeout)
        )
        def _post():
            return self.circuit_breaker.call(
                lambda: self.session.post(
                    self.endpoint,
                    data=self._build_form(),
                    files={'file': (filename or 'document', content, media_type)},
                    timeout=self.timeout,
                )
            )

        try:
            logger.info(f"Sending {filename or 'document'} ({len(content)} bytes) to OCR.space")
            response = _post()
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise APIError(f"OCR service request failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise APIError(f"Could not reach OCR service: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise APIError(
                "OCR service returned an invalid response",
                status_code=response.status_code
            ) from e

        if not isinstance(payload, dict):
            raise APIError(
                f"OCR service returned an invalid response: {payload!r}",
                status_code=response.status_code
            )
        return payload

    def extract_ocr_text(self, content: bytes, filename: str = '', media_type: str = 'application/octet-stream') -> str:
        """
        Extract raw text from a document.

        Returns:
            The recognized text (never empty)

        Raises:
            APIError: If the service reports an error or returns no text
        """
        payload = self.process_document(content, filename, media_type)

        if payload.get('IsErroredOnProcessing'):
            raise APIError(self._service_error_message(payload), response=payload)

        text = self.safe_get_parsed_text(payload)
        if not text or not text.strip():
            raise APIError(EMPTY_TEXT_ERROR, response=payload)

        logger.info(f"Extracted {len(text)} characters of OCR text")
        logger.debug(f"OCR.space raw text:\n{text}")
        return text

    @staticmethod
    def _service_error_message(payload: Dict[str, Any]) -> str:
        """Build an error message from the service's ErrorMessage field."""
        messages = payload.get('ErrorMessage')
        if isinstance(messages, list):
            messages = next((str(m) for m in messages if m), None)
        if messages:
            return f"OCR service error: {messages}"
        return GENERIC_SERVICE_ERROR

    @staticmethod
    def safe_get_parsed_text(payload: Dict[str, Any]) -> Optional[str]:
        """
        Safely extract ``ParsedResults[0].ParsedText`` from a response.

        Returns:
            The parsed text, or None if the path does not exist
        """
        results = payload.get('ParsedResults')
        if not isinstance(results, list) or not results:
            return None
        first = results[0]
        if not isinstance(first, dict):
            return None
        return first.get('ParsedText')


class RemoteTextSource:
    """Adapts OCRSpaceClient to the text source interface."""

    name = 'remote'

    def __init__(self, client: Optional[OCRSpaceClient] = None):
        self.client = client or OCRSpaceClient()

    def extract_text(self, document: RawDocument) -> str:
        return self.client.extract_ocr_text(
            document.content,
            filename=document.filename,
            media_type=document.media_type
        )

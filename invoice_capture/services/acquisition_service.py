"""
Acquisition Service.

Runs the ordered list of text sources until one of them returns text.
"""

from typing import List, Optional, Sequence
from ..clients.ocr_space_client import OCRSpaceClient, RemoteTextSource
from ..clients.gemini_client import GeminiInvoiceExtractor
from ..processors.text_acquisition import LocalTextExtractor
from ..config.settings import get_settings, Settings
from ..core.exceptions import AcquisitionError, ConfigurationError, describe_exception
from ..core.interfaces import ITextSource
from ..core.logging_config import get_logger
from ..core.results import Result
from ..models import RawDocument

logger = get_logger(__name__)


def build_text_sources(
    settings: Optional[Settings] = None,
    prefer_remote: Optional[bool] = None
) -> List[ITextSource]:
    """
    Build the default acquisition chain.

    Args:
        settings: Optional settings instance
        prefer_remote: Try OCR.space before local OCR (default from settings)

    Returns:
        ``[remote, local]`` when remote is preferred, otherwise ``[local]``

    Raises:
        ConfigurationError: If remote is preferred but no API key is set
    """
    settings = settings or get_settings()
    if prefer_remote is None:
        prefer_remote = settings.prefer_remote_ocr

    local = LocalTextExtractor(settings)
    if not prefer_remote:
        return [local]

    if not settings.has_remote_credentials():
        raise ConfigurationError(
            "Remote OCR is enabled but OCR_SPACE_API_KEY is not set. "
            "Set the key or disable PREFER_REMOTE_OCR."
        )
    return [RemoteTextSource(OCRSpaceClient(settings=settings)), local]


def build_structured_extractor(
    settings: Optional[Settings] = None,
    enabled: Optional[bool] = None
) -> Optional[GeminiInvoiceExtractor]:
    """
    Build the structured extractor tried before the text sources.

    Args:
        settings: Optional settings instance
        enabled: Use Gemini extraction (default from USE_LLM_EXTRACTION)

    Returns:
        A GeminiInvoiceExtractor, or None when LLM extraction is disabled

    Raises:
        ConfigurationError: If enabled but no Gemini API key is set
    """
    settings = settings or get_settings()
    if enabled is None:
        enabled = settings.use_llm_extraction
    if not enabled:
        return None

    if not settings.has_llm_credentials():
        raise ConfigurationError(
            "LLM extraction is enabled but GEMINI_API_KEY is not set. "
            "Set the key or disable USE_LLM_EXTRACTION."
        )
    return GeminiInvoiceExtractor(settings=settings)


class AcquisitionService:
    """
    Obtains raw text from a document using an ordered list of sources.

    A failing source is logged and the next one is tried; the caller only
    sees an error when every source failed.
    """

    def __init__(self, sources: Optional[Sequence[ITextSource]] = None):
        """
        Initialize acquisition service.

        Args:
            sources: Text sources in priority order (default chain if None)
        """
        self.sources = list(sources) if sources is not None else build_text_sources()
        if not self.sources:
            raise ConfigurationError("At least one text source is required")

    def acquire(self, document: RawDocument) -> Result[str]:
        """
        Extract text from a document.

        Args:
            document: Uploaded document

        Returns:
            Result with the extracted text, or a failure carrying an
            AcquisitionError that lists why each source failed
        """
        failures = []
        last_failure: Optional[Result[str]] = None

        for source in self.sources:
            result = self._attempt(source, document)
            if result.is_success():
                if failures:
                    logger.info(f"Text obtained from '{source.name}' source after fallback")
                return result

            last_failure = result
            failures.append((source.name, result.get_error()))
            logger.warning(
                f"Text source '{source.name}' failed for {document.filename or 'document'}: "
                f"{result.get_error()}"
            )

        if len(failures) == 1:
            return last_failure

        details = "; ".join(f"{name}: {error}" for name, error in failures)
        return Result.from_exception(AcquisitionError(f"All text sources failed ({details})"))

    @staticmethod
    def _attempt(source: ITextSource, document: RawDocument) -> Result[str]:
        try:
            text = source.extract_text(document)
        except AcquisitionError as e:
            return Result.from_exception(e)
        except Exception as e:
            logger.error(f"Unexpected error in text source '{source.name}': {describe_exception(e)}", exc_info=True)
            return Result.from_exception(AcquisitionError(describe_exception(e)))

        if text is None:
            return Result.from_exception(AcquisitionError(f"Text source '{source.name}' returned no text"))
        return Result.success_result(text)

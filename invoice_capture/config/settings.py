"""
Application settings and configuration.

Centralizes all configurable values.
"""

import os
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Settings:
    """
    Application settings.

    Centralizes all configuration values.
    """

    def __init__(self):
        """Initialize settings from environment and defaults."""
        # Remote OCR service (OCR.space). No shared demo key: must be configured.
        self.ocr_space_api_key = os.getenv('OCR_SPACE_API_KEY') or None
        self.ocr_space_endpoint = os.getenv('OCR_SPACE_ENDPOINT', 'https://api.ocr.space/parse/image')
        self.ocr_space_language = os.getenv('OCR_SPACE_LANGUAGE', 'spa')
        self.ocr_space_engine = os.getenv('OCR_SPACE_ENGINE', '2')
        self.ocr_space_timeout = float(os.getenv('OCR_SPACE_TIMEOUT', '60'))

        # Structured extraction with Gemini (optional, tried before the text chain)
        self.gemini_api_key = os.getenv('GEMINI_API_KEY') or None
        self.gemini_model = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')
        self.use_llm_extraction = _env_bool('USE_LLM_EXTRACTION', 'false')

        # Local OCR
        self.ocr_language = os.getenv('OCR_LANGUAGE', 'spa')
        self.tesseract_cmd = os.getenv('TESSERACT_CMD') or None
        self.min_pdf_text_length = int(os.getenv('MIN_PDF_TEXT_LENGTH', '50'))
        self.pdf_render_dpi = int(os.getenv('PDF_RENDER_DPI', '300'))

        # Processing Settings
        self.invoices_dir = os.getenv('INVOICES_DIR', 'invoices')
        self.output_dir = os.getenv('OUTPUT_DIR', 'output')
        self.prefer_remote_ocr = _env_bool('PREFER_REMOTE_OCR', 'true')

        # Retry Settings (remote transport errors only)
        self.max_retries = int(os.getenv('MAX_RETRIES', '2'))
        self.retry_delay = float(os.getenv('RETRY_DELAY', '1.0'))

        # Logging Settings
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def has_remote_credentials(self) -> bool:
        """Check whether the remote OCR service can be used."""
        return bool(self.ocr_space_api_key)

    def has_llm_credentials(self) -> bool:
        """Check whether Gemini extraction can be used."""
        return bool(self.gemini_api_key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary (excluding sensitive data)."""
        return {
            'ocr_space_endpoint': self.ocr_space_endpoint,
            'ocr_space_language': self.ocr_space_language,
            'ocr_space_engine': self.ocr_space_engine,
            'ocr_space_timeout': self.ocr_space_timeout,
            'gemini_model': self.gemini_model,
            'use_llm_extraction': self.use_llm_extraction,
            'ocr_language': self.ocr_language,
            'min_pdf_text_length': self.min_pdf_text_length,
            'pdf_render_dpi': self.pdf_render_dpi,
            'invoices_dir': self.invoices_dir,
            'output_dir': self.output_dir,
            'prefer_remote_ocr': self.prefer_remote_ocr,
            'max_retries': self.max_retries,
            'retry_delay': self.retry_delay,
            'log_level': self.log_level,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


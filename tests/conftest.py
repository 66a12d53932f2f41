"""
Shared fixtures for invoice capture tests.
"""

from datetime import datetime

import pytest

from invoice_capture.config.settings import Settings
from invoice_capture.extractors.invoice_parser import InvoiceTextParser

FIXED_NOW = datetime(2026, 10, 17, 12, 30, 0)

SAMPLE_INVOICE_TEXT = """
SENIAT
COMPUTER SUPPLIES, C. A.
RIF: J-30123456-7
FACTURA N° 00004512
FECHA: 15/03/2024
1 IMPRESORA MULTIFUNCIONAL HP 415
BASE IMPONIBLE 22.951,14
IVA 16% 3.672,18
TOTAL A PAGAR Bs. 26.623,32
"""


@pytest.fixture
def parser():
    """Parser with a fixed clock."""
    return InvoiceTextParser(now=lambda: FIXED_NOW)


@pytest.fixture
def settings():
    """Settings isolated from the developer's environment."""
    settings = Settings()
    settings.ocr_space_api_key = 'test-key'
    settings.ocr_space_endpoint = 'https://ocr.example.test/parse/image'
    settings.ocr_space_language = 'spa'
    settings.ocr_space_engine = '2'
    settings.ocr_space_timeout = 5
    settings.gemini_api_key = 'gemini-test-key'
    settings.gemini_model = 'gemini-2.5-flash'
    settings.use_llm_extraction = False
    settings.ocr_language = 'spa'
    settings.tesseract_cmd = None
    settings.min_pdf_text_length = 50
    settings.pdf_render_dpi = 200
    settings.prefer_remote_ocr = True
    settings.max_retries = 2
    settings.retry_delay = 0.01
    return settings


@pytest.fixture
def sample_text():
    return SAMPLE_INVOICE_TEXT

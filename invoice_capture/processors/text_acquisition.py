"""
Local Text Acquisition Module

Extracts raw text from invoice documents without network access: the
digital text layer of PDFs through pdfplumber, and Tesseract OCR for images
and scanned PDFs.
"""

from io import BytesIO
from typing import List, Optional
import pdfplumber
import pytesseract
from pdf2image import convert_from_bytes
from PIL import Image
from ..config.settings import get_settings, Settings
from ..core.exceptions import AcquisitionError, describe_exception
from ..core.logging_config import get_logger
from ..models import RawDocument

logger = get_logger(__name__)


class LocalTextExtractor:
    """
    Extracts text from PDFs and images on the local machine.

    PDFs are read from their text layer first; when that yields almost
    nothing the pages are rendered and run through OCR instead.
    """

    name = 'local'

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the extractor.

        Args:
            settings: Optional settings instance
        """
        self.settings = settings or get_settings()
        if self.settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_cmd

    def extract_text(self, document: RawDocument) -> str:
        """
        Extract all recoverable text from a document.

        Args:
            document: Uploaded document

        Returns:
            Extracted text (may be empty)

        Raises:
            AcquisitionError: If the document cannot be read or OCR fails
        """
        try:
            if document.is_pdf:
                text = self._extract_pdf(document)
            else:
                text = self._recognize_image(document.content)
        except AcquisitionError:
            raise
        except Exception as e:
            logger.error(f"Local OCR failed for {document.filename}: {describe_exception(e)}", exc_info=True)
            raise AcquisitionError(
                f"Technical error processing {document.filename or 'document'}: {describe_exception(e)}"
            ) from e

        logger.info(f"Extracted {len(text)} characters from {document.filename or 'document'}")
        logger.debug(f"Extracted text:\n{text}")
        return text

    def _extract_pdf(self, document: RawDocument) -> str:
        text = self._read_pdf_text_layer(document.content)
        if len(text.strip()) >= self.settings.min_pdf_text_length:
            return text

        logger.info(
            f"PDF text layer of {document.filename or 'document'} is sparse "
            f"({len(text.strip())} chars), running OCR on rendered pages"
        )
        return self._recognize_pdf_pages(document.content)

    def _read_pdf_text_layer(self, content: bytes) -> str:
        """
        Read the digital text of every page, in page order.

        Words of a page are joined by spaces and pages by newlines.
        """
        pages: List[str] = []
        with pdfplumber.open(BytesIO(content)) as pdf:
            for page in pdf.pages:
                words = page.extract_words() or []
                pages.append(' '.join(word['text'] for word in words))
        return '\n'.join(pages)

    def _recognize_pdf_pages(self, content: bytes) -> str:
        """Render each PDF page to an image and OCR it."""
        images = convert_from_bytes(content, dpi=self.settings.pdf_render_dpi)
        texts = []
        for image in images:
            try:
                texts.append(self._ocr(image))
            finally:
                image.close()
        return '\n'.join(texts)

    def _recognize_image(self, content: bytes) -> str:
        with Image.open(BytesIO(content)) as image:
            return self._ocr(image)

    def _ocr(self, image: Image.Image) -> str:
        return pytesseract.image_to_string(image, lang=self.settings.ocr_language) or ''

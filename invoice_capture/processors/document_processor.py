"""
Document Processor Module

Loads invoice files (PDFs and images) from disk as RawDocument objects.
"""

import mimetypes
from typing import List, Optional
from pathlib import Path
from ..core.logging_config import get_logger
from ..models import RawDocument, PDF_MEDIA_TYPE

logger = get_logger(__name__)

SUPPORTED_MEDIA_TYPES = {
    '.pdf': PDF_MEDIA_TYPE,
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
}


def guess_media_type(file_path: Path) -> Optional[str]:
    """
    Return the media type of a supported invoice file, or None.

    Args:
        file_path: Path of the file

    Returns:
        Media type string, or None for unsupported files
    """
    suffix = file_path.suffix.lower()
    if suffix in SUPPORTED_MEDIA_TYPES:
        return SUPPORTED_MEDIA_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(file_path.name)
    if guessed and (guessed == PDF_MEDIA_TYPE or guessed.startswith('image/')):
        return guessed
    return None


class DocumentProcessor:
    """
    Finds and loads invoice documents from a directory.
    """

    def __init__(self, invoices_dir: str = "invoices"):
        """
        Initialize document processor.

        Args:
            invoices_dir: Directory containing invoice files

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        self.invoices_dir = Path(invoices_dir)

        if not self.invoices_dir.exists():
            raise FileNotFoundError(f"Invoices directory not found: {invoices_dir}")

    def get_document_files(self) -> List[Path]:
        """
        Get all supported invoice files from the invoices directory.

        Returns:
            Sorted list of Path objects
        """
        files = sorted(
            path for path in self.invoices_dir.iterdir()
            if path.is_file() and guess_media_type(path)
        )
        logger.info(f"Found {len(files)} invoice files in {self.invoices_dir}")
        return files

    @staticmethod
    def load_document(file_path: str) -> Optional[RawDocument]:
        """
        Load a single file as a RawDocument.

        Args:
            file_path: Path to a PDF or image file

        Returns:
            RawDocument, or None if the file is missing or unsupported
        """
        path = Path(file_path)

        if not path.is_file():
            logger.error(f"File not found: {file_path}")
            return None

        media_type = guess_media_type(path)
        if media_type is None:
            logger.error(f"Unsupported file type: {file_path}")
            return None

        return RawDocument(content=path.read_bytes(), media_type=media_type, filename=path.name)

"""
Processing Service.

Orchestrates batch capture of invoice files from a directory.
"""

from typing import List, Dict, Any, Optional
from pathlib import Path
from ..processors.document_processor import DocumentProcessor
from ..services.invoice_service import InvoiceService
from ..json_generator import JSONGenerator
from ..core.exceptions import DuplicateInvoiceError
from ..core.logging_config import get_logger
from ..core.results import Result

logger = get_logger(__name__)


def output_file_name(filename: str) -> str:
    """
    JSON file name for an invoice file, unique per input name.

    The extension stays in the name: "a.pdf" and "a.png" map to different files.

    >>> output_file_name("a.pdf")
    'a_pdf.json'
    """
    path = Path(filename)
    return f"{path.stem}{path.suffix.replace('.', '_')}.json"


class ProcessingService:
    """
    Service for batch processing invoices.

    Invoices captured earlier in a batch count as registered invoices for
    the duplicate check of later files.
    """

    def __init__(
        self,
        invoice_service: Optional[InvoiceService] = None,
        json_generator: Optional[JSONGenerator] = None
    ):
        """
        Initialize processing service.

        Args:
            invoice_service: Optional invoice service (creates default if None)
            json_generator: Optional JSON generator (creates default if None)
        """
        self.invoice_service = invoice_service or InvoiceService()
        self.json_generator = json_generator or JSONGenerator()

    def process_single_file(
        self,
        file_path: str,
        output_dir: Optional[str] = "output",
        existing_invoices: Optional[List[Dict[str, Any]]] = None
    ) -> Result[Dict[str, Any]]:
        """
        Capture a single invoice file.

        Args:
            file_path: Path to a PDF or image
            output_dir: Output directory for JSON (None to skip saving)
            existing_invoices: Invoice records already registered

        Returns:
            Result with the generated invoice record
        """
        document = DocumentProcessor.load_document(file_path)
        if document is None:
            return Result.failure_result(f"Cannot load invoice file: {file_path}")

        result = self.invoice_service.process_document(document, existing_invoices or [])
        if result.is_failure():
            logger.warning(f"Failed to process {document.filename}: {result.get_error()}")
            return Result(success=False, error=result.get_error(), exception=result.get_exception())

        record = self.json_generator.generate_json(result.get_value(), document)

        if output_dir:
            output_path = Path(output_dir) / output_file_name(document.filename)
            try:
                self.json_generator.save_json(record, str(output_path))
            except OSError as e:
                return Result.failure_result(f"Failed to save invoice {document.filename}: {str(e)}")

        logger.info(f"✓ Successfully processed {document.filename}")
        return Result.success_result(record)

    def process_all_invoices(
        self,
        invoices_dir: str = "invoices",
        output_dir: str = "output"
    ) -> Dict[str, Any]:
        """
        Capture all invoices in a directory.

        Args:
            invoices_dir: Directory containing invoice files
            output_dir: Directory to save JSON output files

        Returns:
            Dictionary with processing summary
        """
        processor = DocumentProcessor(invoices_dir)
        files = processor.get_document_files()

        captured: List[Dict[str, Any]] = []
        duplicates = 0
        failed = 0

        for path in files:
            result = self.process_single_file(str(path), output_dir, existing_invoices=captured)

            if result.is_success():
                captured.append(result.get_value())
            elif isinstance(result.get_exception(), DuplicateInvoiceError):
                duplicates += 1
                logger.info(f"✗ Skipped {path.name}: {result.get_error()}")
            else:
                failed += 1
                logger.warning(f"✗ Failed to process {path.name}: {result.get_error()}")

        if captured:
            combined = self.json_generator.generate_combined_json(captured)
            self.json_generator.save_json(combined, str(Path(output_dir) / "all_invoices.json"))

        summary = {
            'total': len(files),
            'successful': len(captured),
            'duplicates': duplicates,
            'failed': failed,
            'output_dir': output_dir
        }
        logger.info(
            f"Processing summary: {summary['successful']}/{summary['total']} captured, "
            f"{duplicates} duplicates, {failed} failed"
        )
        return summary

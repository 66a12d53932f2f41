#!/usr/bin/env python3
"""
Main Application Entry Point

Command-line interface for capturing invoices and extracting structured data.
"""

import argparse
import sys
from pathlib import Path

from invoice_capture.services.acquisition_service import (
    AcquisitionService,
    build_structured_extractor,
    build_text_sources,
)
from invoice_capture.services.invoice_service import InvoiceService
from invoice_capture.services.processing_service import ProcessingService
from invoice_capture.core.exceptions import ConfigurationError
from invoice_capture.core.logging_config import configure_from_settings, get_logger
from invoice_capture.config.settings import get_settings

# Configure logging from settings
settings = get_settings()
configure_from_settings(settings)
logger = get_logger(__name__)


def build_processing_service(local_only: bool = False) -> ProcessingService:
    """
    Build the processing service with the configured acquisition chain.

    Args:
        local_only: Skip Gemini and the remote OCR service

    Returns:
        ProcessingService instance
    """
    sources = build_text_sources(settings, prefer_remote=False if local_only else None)
    structured = build_structured_extractor(settings, enabled=False if local_only else None)
    invoice_service = InvoiceService(
        acquisition_service=AcquisitionService(sources),
        structured_extractor=structured
    )
    return ProcessingService(invoice_service=invoice_service)


def process_single_file(file_path: str, output_dir: str = "output", local_only: bool = False) -> bool:
    """
    Process a single invoice file.

    Args:
        file_path: Path to the PDF or image to process
        output_dir: Directory to save JSON output
        local_only: Skip the remote OCR service

    Returns:
        True if processing succeeded, False otherwise
    """
    processing_service = build_processing_service(local_only)
    result = processing_service.process_single_file(file_path, output_dir)

    if result.is_success():
        return True

    logger.error(f"Failed to process {file_path}: {result.get_error()}")
    return False


def process_all_invoices(invoices_dir: str = "invoices", output_dir: str = "output", local_only: bool = False) -> None:
    """
    Process all invoices in the specified directory.

    Args:
        invoices_dir: Directory containing invoice files
        output_dir: Directory to save JSON output files
        local_only: Skip the remote OCR service
    """
    processing_service = build_processing_service(local_only)
    summary = processing_service.process_all_invoices(invoices_dir, output_dir)

    print("\n" + "=" * 60)
    print("Processing Summary")
    print("=" * 60)
    print(f"Total documents: {summary['total']}")
    print(f"Successfully captured: {summary['successful']}")
    print(f"Duplicates skipped: {summary['duplicates']}")
    print(f"Failed: {summary['failed']}")
    print(f"Output directory: {summary['output_dir']}")
    print("=" * 60)


def main():
    """Main entry point for the application."""
    parser = argparse.ArgumentParser(
        description='Extract structured data from invoice images and PDFs'
    )

    parser.add_argument(
        '--file',
        type=str,
        help='Process a specific PDF or image file'
    )

    parser.add_argument(
        '--invoices-dir',
        type=str,
        default=settings.invoices_dir,
        help=f'Directory containing invoice files (default: {settings.invoices_dir})'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default=settings.output_dir,
        help=f'Directory to save JSON output files (default: {settings.output_dir})'
    )

    parser.add_argument(
        '--local-only',
        action='store_true',
        help='Use only local OCR (pdfplumber/Tesseract), never Gemini or the OCR.space service'
    )

    args = parser.parse_args()

    logger.debug(f"Effective settings: {settings.to_dict()}")
    Path(args.output_dir).mkdir(parents=True, exist_ok=True)

    try:
        if args.file:
            success = process_single_file(args.file, args.output_dir, args.local_only)
            sys.exit(0 if success else 1)
        else:
            process_all_invoices(args.invoices_dir, args.output_dir, args.local_only)
            sys.exit(0)

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(2)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        sys.exit(1)


if __name__ == '__main__':
    main()

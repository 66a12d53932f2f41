"""
Centralized logging configuration.

Provides consistent logging across the application and keeps the PDF and
imaging libraries from flooding the output.
"""

import logging
import sys
from typing import Optional
from pathlib import Path

# Third-party loggers that are extremely chatty at DEBUG level
NOISY_LOGGERS = ('pdfminer', 'pdfplumber', 'PIL', 'urllib3')


def setup_logging(
    level: str = 'INFO',
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string (uses default if None)
        log_file: Optional log file path
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format=format_string,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_from_settings(settings, log_file: Optional[str] = None) -> None:
    """
    Configure logging from settings object.

    Args:
        settings: Settings object with log_level and log_format
        log_file: Optional log file path
    """
    setup_logging(
        level=settings.log_level,
        format_string=settings.log_format,
        log_file=log_file
    )

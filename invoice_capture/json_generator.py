"""
JSON Generator Module

Converts captured invoices into the JSON records stored by the expense
tracker, attaching the caller-side metadata (id, file name, file type).
"""

import base64
import json
import uuid
from datetime import datetime
from typing import Dict, Any, List, Optional
from pathlib import Path
from .core.logging_config import get_logger
from .models import InvoiceCandidate, RawDocument

logger = get_logger(__name__)


class JSONGenerator:
    """
    Generates JSON output from captured invoices.
    """

    @staticmethod
    def to_data_url(document: RawDocument) -> str:
        """Render a document as a base64 data URL."""
        encoded = base64.b64encode(document.content).decode('ascii')
        return f"data:{document.media_type};base64,{encoded}"

    @staticmethod
    def generate_json(
        candidate: InvoiceCandidate,
        document: Optional[RawDocument] = None,
        include_file_data: bool = False
    ) -> Dict[str, Any]:
        """
        Generate an invoice record from a captured invoice.

        Args:
            candidate: Parsed invoice
            document: Optional source document for file metadata
            include_file_data: Embed the document as a data URL

        Returns:
            Dictionary with the invoice record
        """
        record = {'id': str(uuid.uuid4())}
        record.update(candidate.to_dict())

        if document is not None:
            record['fileName'] = document.filename
            record['fileType'] = document.media_type
            if include_file_data:
                record['fileDataUrl'] = JSONGenerator.to_data_url(document)

        return record

    @staticmethod
    def save_json(data: Dict[str, Any], output_path: str, pretty: bool = True) -> None:
        """
        Save JSON data to a file.

        Args:
            data: Dictionary to save as JSON
            output_path: Path where JSON file should be saved
            pretty: If True, format JSON with indentation
        """
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_file, 'w', encoding='utf-8') as f:
                if pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(data, f, ensure_ascii=False)

            logger.info(f"Saved JSON output to {output_path}")
        except Exception as e:
            logger.error(f"Failed to save JSON to {output_path}: {str(e)}")
            raise

    @staticmethod
    def generate_combined_json(all_invoice_data: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Generate a combined JSON document with all captured invoices.

        Args:
            all_invoice_data: List of invoice records

        Returns:
            Dictionary containing all invoices and their grand total
        """
        return {
            'invoices': all_invoice_data,
            'total_invoices': len(all_invoice_data),
            'total_amount': round(sum(float(item.get('totalAmount') or 0) for item in all_invoice_data), 2),
            'metadata': {
                'generated_at': datetime.now().isoformat(timespec='seconds'),
                'version': '1.0'
            }
        }

"""
Integration tests for end-to-end invoice processing.
"""

import json
from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

import main
from invoice_capture.json_generator import JSONGenerator
from invoice_capture.models import RawDocument
from invoice_capture.processors.text_acquisition import LocalTextExtractor
from invoice_capture.services.acquisition_service import AcquisitionService
from invoice_capture.services.invoice_service import InvoiceService

OCR_TARGET = 'invoice_capture.processors.text_acquisition.pytesseract.image_to_string'


def _png_bytes() -> bytes:
    buffer = BytesIO()
    Image.new('RGB', (40, 40), 'white').save(buffer, format='PNG')
    return buffer.getvalue()


class TestIntegration:
    """Integration tests for complete processing pipeline."""

    @pytest.fixture(autouse=True)
    def _setup(self, settings, parser):
        settings.prefer_remote_ocr = False
        self.settings = settings
        self.service = InvoiceService(
            acquisition_service=AcquisitionService([LocalTextExtractor(settings)]),
            parser=parser
        )
        self.document = RawDocument(content=_png_bytes(), media_type='image/png', filename='factura.png')

    def test_photo_to_record(self, sample_text):
        """Test a photographed invoice through local OCR to a stored record."""
        with patch(OCR_TARGET, return_value=sample_text):
            result = self.service.process_document(self.document)

        record = JSONGenerator.generate_json(result.get_value(), self.document, include_file_data=True)

        assert record['invoiceDate'] == '2024-03-15'
        assert record['supplierName'] == 'COMPUTER SUPPLIES, C. A.'
        assert record['rif'] == 'J-30123456-7'
        assert record['invoiceNumber'] == '00004512'
        assert record['itemsDescription'] == '1 IMPRESORA MULTIFUNCIONAL HP 415'
        assert record['totalAmount'] == pytest.approx(26623.32)
        assert record['fileName'] == 'factura.png'
        assert record['fileDataUrl'].startswith('data:image/png;base64,')
        assert record['id']

    def test_second_upload_is_duplicate(self, sample_text):
        """Test uploading the same invoice twice."""
        with patch(OCR_TARGET, return_value=sample_text):
            first = self.service.process_document(self.document)
            record = JSONGenerator.generate_json(first.get_value(), self.document)
            second = self.service.process_document(self.document, [record])

        assert second.is_failure()
        assert second.get_exception().existing_id == record['id']

    def test_blank_photo_is_rejected(self):
        """Test a photo where OCR finds nothing useful."""
        with patch(OCR_TARGET, return_value='\n\n'):
            result = self.service.process_document(self.document)

        assert result.is_failure()
        assert 'Could not read the invoice' in result.get_error()

    def test_command_line_batch(self, tmp_path, monkeypatch, sample_text):
        """Test the batch command with local OCR only."""
        invoices_dir = tmp_path / 'invoices'
        invoices_dir.mkdir()
        (invoices_dir / 'factura.png').write_bytes(_png_bytes())
        output_dir = tmp_path / 'output'
        monkeypatch.setattr('sys.argv', [
            'invoice-capture', '--invoices-dir', str(invoices_dir),
            '--output-dir', str(output_dir), '--local-only',
        ])

        with patch(OCR_TARGET, return_value=sample_text), pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 0
        combined = json.loads((output_dir / 'all_invoices.json').read_text(encoding='utf-8'))
        assert combined['invoices'][0]['invoiceNumber'] == '00004512'

    def test_command_line_missing_key(self, tmp_path, monkeypatch):
        """Test that remote OCR without a key exits with a configuration error."""
        monkeypatch.setattr(main.settings, 'prefer_remote_ocr', True)
        monkeypatch.setattr(main.settings, 'ocr_space_api_key', None)
        monkeypatch.setattr('sys.argv', [
            'invoice-capture', '--invoices-dir', str(tmp_path), '--output-dir', str(tmp_path / 'out'),
        ])

        with pytest.raises(SystemExit) as exc_info:
            main.main()

        assert exc_info.value.code == 2

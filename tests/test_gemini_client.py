"""
Unit tests for the Gemini structured extractor.
"""

import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.genai import errors as genai_errors

from invoice_capture.clients.gemini_client import EXTRACTION_PROMPT, GeminiInvoiceExtractor
from invoice_capture.core.exceptions import APIError, ConfigurationError, InsufficientSignalError
from invoice_capture.models import (
    DEFAULT_ITEMS_DESCRIPTION,
    DEFAULT_SUPPLIER_NAME,
    RawDocument,
)

FIELDS = {
    'invoiceDate': '2024-03-15',
    'supplierName': 'COMPUTER SUPPLIES, C.A.',
    'rif': 'j30123456-7',
    'invoiceNumber': '00004512',
    'itemsDescription': '1 IMPRESORA MULTIFUNCIONAL HP 415',
    'totalAmount': 26623.32,
}


def _fields(**overrides):
    data = dict(FIELDS)
    data.update(overrides)
    return data


def _response(text):
    return SimpleNamespace(text=text)


class TestGeminiInvoiceExtractor:
    """Test cases for GeminiInvoiceExtractor."""

    @pytest.fixture(autouse=True)
    def _setup(self, settings):
        self.settings = settings
        self.client = MagicMock()
        self.extractor = GeminiInvoiceExtractor(settings=settings, client=self.client)
        self.document = RawDocument(content=b'img', media_type='image/jpeg', filename='ticket.jpg')

    def test_missing_api_key(self):
        """Test that a missing key raises ConfigurationError."""
        self.settings.gemini_api_key = None
        with pytest.raises(ConfigurationError, match='GEMINI_API_KEY'):
            GeminiInvoiceExtractor(settings=self.settings, client=self.client)

    def test_request_carries_document_and_prompt(self):
        """The document goes inline with the prompt and a JSON response type."""
        self.client.models.generate_content.return_value = _response(json.dumps(FIELDS))

        self.extractor.generate_json(self.document)

        kwargs = self.client.models.generate_content.call_args.kwargs
        assert kwargs['model'] == 'gemini-2.5-flash'
        part, prompt = kwargs['contents']
        assert part.inline_data.data == b'img'
        assert part.inline_data.mime_type == 'image/jpeg'
        assert prompt == EXTRACTION_PROMPT
        assert kwargs['config'].response_mime_type == 'application/json'

    def test_extract_invoice(self):
        """Test a complete response mapped onto a candidate."""
        self.client.models.generate_content.return_value = _response(json.dumps(FIELDS))

        candidate = self.extractor.extract_invoice(self.document)

        assert candidate.invoice_date == '2024-03-15'
        assert candidate.supplier_name == 'COMPUTER SUPPLIES, C.A.'
        assert candidate.tax_id == 'J-30123456-7'
        assert candidate.invoice_number == '00004512'
        assert candidate.items_description == '1 IMPRESORA MULTIFUNCIONAL HP 415'
        assert candidate.total_amount == pytest.approx(26623.32)
        assert candidate.invoice_number_matched is True

    def test_json_block_inside_prose(self):
        """Text around the JSON object is ignored."""
        raw = "Aquí está la factura:\n```json\n" + json.dumps(FIELDS) + "\n```"
        assert GeminiInvoiceExtractor.parse_response_text(raw)['invoiceNumber'] == '00004512'

    @pytest.mark.parametrize("raw", [None, "", "No puedo leer la imagen"])
    def test_no_json_block(self, raw):
        """Test responses without a JSON object."""
        with pytest.raises(APIError, match='did not return a JSON object'):
            GeminiInvoiceExtractor.parse_response_text(raw)

    def test_invalid_json(self):
        """Test a malformed JSON object."""
        with pytest.raises(APIError, match='invalid JSON'):
            GeminiInvoiceExtractor.parse_response_text('{"rif": }')

    def test_missing_fields_are_named(self):
        """Every absent field is listed in the error."""
        raw = json.dumps({'rif': 'J-12345678-9', 'invoiceNumber': '123'})

        with pytest.raises(APIError) as exc_info:
            GeminiInvoiceExtractor.parse_response_text(raw)

        assert str(exc_info.value) == (
            'Missing fields in the AI response: invoiceDate, supplierName, itemsDescription, totalAmount'
        )

    @pytest.mark.parametrize("overrides, missing", [
        ({'rif': '', 'invoiceNumber': '  '}, 'RIF and invoice number'),
        ({'rif': None}, 'RIF'),
        ({'invoiceNumber': ''}, 'invoice number'),
    ])
    def test_essential_fields_required(self, overrides, missing):
        """An invoice without RIF or number is rejected, naming what is missing."""
        with pytest.raises(InsufficientSignalError) as exc_info:
            self.extractor.to_candidate(_fields(**overrides))

        assert f'({missing})' in str(exc_info.value)

    @pytest.mark.parametrize("value, expected", [
        (100, 100.0),
        (26623.32, 26623.32),
        ('26.623,32', 0.0),
        (-5, 0.0),
        (None, 0.0),
        (True, 0.0),
        (float('nan'), 0.0),
    ])
    def test_total_must_be_a_non_negative_number(self, value, expected):
        """Test coercion of totalAmount."""
        assert self.extractor.to_candidate(_fields(totalAmount=value)).total_amount == expected

    def test_defaults_for_empty_fields(self):
        """Empty supplier and description fall back to the usual defaults."""
        candidate = self.extractor.to_candidate(_fields(supplierName=None, itemsDescription=''))

        assert candidate.supplier_name == DEFAULT_SUPPLIER_NAME
        assert candidate.items_description == DEFAULT_ITEMS_DESCRIPTION

    def test_non_iso_date_is_dropped(self):
        """Test a date that is not YYYY-MM-DD."""
        assert self.extractor.to_candidate(_fields(invoiceDate='15/03/2024')).invoice_date == ''

    def test_unrecognized_tax_id_is_kept(self):
        """A RIF the pattern cannot read is kept as returned."""
        assert self.extractor.to_candidate(_fields(rif='RIF-123')).tax_id == 'RIF-123'

    @patch('invoice_capture.core.retry.time.sleep')
    def test_server_error_is_retried(self, mock_sleep):
        """Server errors are retried, then reported as APIError."""
        error = genai_errors.ServerError(
            503, {'error': {'code': 503, 'message': 'The model is overloaded.', 'status': 'UNAVAILABLE'}}
        )
        self.client.models.generate_content.side_effect = error

        with pytest.raises(APIError, match='The model is overloaded') as exc_info:
            self.extractor.extract_invoice(self.document)

        assert exc_info.value.status_code == 503
        assert self.client.models.generate_content.call_count == self.settings.max_retries

    def test_client_error_is_not_retried(self):
        """Test request errors such as an invalid key."""
        error = genai_errors.ClientError(
            400, {'error': {'code': 400, 'message': 'API key not valid.', 'status': 'INVALID_ARGUMENT'}}
        )
        self.client.models.generate_content.side_effect = error

        with pytest.raises(APIError) as exc_info:
            self.extractor.extract_invoice(self.document)

        assert exc_info.value.status_code == 400
        assert self.client.models.generate_content.call_count == 1

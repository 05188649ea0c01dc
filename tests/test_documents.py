"""
Tests for document loading, file search and record writing.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from invoice_scraper.documents import (
    decode_document_bytes,
    extract_invoice_from_file,
    find_file,
    load_document_text,
    read_record,
    write_record,
)
from invoice_scraper.exceptions import DocumentReadError, UnsupportedFileTypeError
from invoice_scraper.schemas import InvoiceRecord


INVOICE_TEXT = "Rechnungsnummer: RE1001\nRechnungsdatum: 05.03.2024\nTotal: €150,00\nMwSt 19%\n"


@pytest.fixture
def mock_pdf_open():
    """Patch pdfplumber.open to return two pages of text."""
    first_page = MagicMock()
    first_page.extract_text.return_value = "Rechnungsnummer: RE1001"
    empty_page = MagicMock()
    empty_page.extract_text.return_value = None
    last_page = MagicMock()
    last_page.extract_text.return_value = "Total: €150,00"

    pdf = MagicMock()
    pdf.pages = [first_page, empty_page, last_page]

    with patch("invoice_scraper.documents.pdfplumber.open") as mock_open:
        mock_open.return_value.__enter__.return_value = pdf
        yield mock_open


class TestFindFile:
    """Tests for the depth-first file search."""

    def test_finds_nested_file(self, tmp_path):
        nested = tmp_path / "a_dir" / "sub"
        nested.mkdir(parents=True)
        target = nested / "invoice_2024.txt"
        target.write_text("x", encoding="utf-8")

        assert find_file(tmp_path, "invoice") == target

    def test_depth_first_in_name_order(self, tmp_path):
        (tmp_path / "a").mkdir()
        nested = tmp_path / "a" / "inv_1.txt"
        nested.write_text("x", encoding="utf-8")
        (tmp_path / "inv_2.txt").write_text("x", encoding="utf-8")

        assert find_file(tmp_path, "inv_") == nested

    def test_directory_names_not_returned(self, tmp_path):
        folder = tmp_path / "invoices"
        folder.mkdir()
        (folder / "notes.txt").write_text("x", encoding="utf-8")

        assert find_file(tmp_path, "invoice") is None

    def test_not_found(self, tmp_path):
        (tmp_path / "other.txt").write_text("x", encoding="utf-8")
        assert find_file(tmp_path, "rechnung") is None

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            find_file(tmp_path / "missing", "invoice")


class TestLoadDocumentText:
    """Tests for reading document text."""

    def test_txt(self, tmp_path):
        path = tmp_path / "rechnung.txt"
        path.write_text(INVOICE_TEXT, encoding="utf-8")
        assert load_document_text(path) == INVOICE_TEXT

    def test_declared_type_overrides_suffix(self, tmp_path):
        path = tmp_path / "rechnung.dat"
        path.write_text(INVOICE_TEXT, encoding="utf-8")
        assert load_document_text(path, "txt") == INVOICE_TEXT

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "rechnung.docx"
        path.write_bytes(b"x")
        with pytest.raises(UnsupportedFileTypeError):
            load_document_text(path)

    def test_missing_txt(self, tmp_path):
        with pytest.raises(DocumentReadError):
            load_document_text(tmp_path / "missing.txt")

    def test_pdf(self, mock_pdf_open):
        text = load_document_text(Path("rechnung.pdf"))
        assert text == "Rechnungsnummer: RE1001\nTotal: €150,00"
        mock_pdf_open.assert_called_once_with(Path("rechnung.pdf"))

    def test_broken_pdf(self):
        with patch("invoice_scraper.documents.pdfplumber.open", side_effect=Exception("broken")):
            with pytest.raises(DocumentReadError) as exc_info:
                load_document_text(Path("rechnung.pdf"))
        assert str(exc_info.value.last_error) == "broken"


class TestDecodeDocumentBytes:
    """Tests for in-memory documents."""

    def test_txt(self):
        assert decode_document_bytes(INVOICE_TEXT.encode("utf-8"), "txt") == INVOICE_TEXT

    def test_pdf(self, mock_pdf_open):
        assert decode_document_bytes(b"%PDF-1.4", "pdf").endswith("Total: €150,00")

    def test_invalid_utf8(self):
        with pytest.raises(DocumentReadError):
            decode_document_bytes(b"\xff\xfe\xfa", "txt")

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFileTypeError):
            decode_document_bytes(b"x", "png")


class TestRecords:
    """Tests for writing and reading records."""

    def test_write_uses_file_keys_and_nulls(self, tmp_path):
        record = InvoiceRecord(invoice_number="RE1001")
        output = write_record(record, tmp_path / "Rechnungsdaten.json")

        data = json.loads(output.read_text(encoding="utf-8"))
        assert data == {
            "rechnungs_nr": "RE1001",
            "rechnungs_datum": None,
            "gesamt_betrag_brutto": None,
            "gesamt_betrag_netto": None,
        }

    def test_euro_sign_written_verbatim(self, tmp_path):
        record = InvoiceRecord(gross_amount="178.50€", net_amount="150.00€")
        output = write_record(record, tmp_path / "out.json")
        assert "178.50€" in output.read_text(encoding="utf-8")

    def test_read_back(self, tmp_path):
        record = InvoiceRecord(
            invoice_number="RE1001",
            invoice_date="05.03.2024",
            gross_amount="178.50€",
            net_amount="150.00€",
        )
        output = write_record(record, tmp_path / "out.json")
        assert read_record(output) == record

    def test_write_to_missing_directory(self, tmp_path):
        with pytest.raises(OSError):
            write_record(InvoiceRecord.empty(), tmp_path / "missing" / "out.json")


class TestExtractInvoiceFromFile:
    """Tests for file-based extraction."""

    def test_txt_file(self, tmp_path):
        path = tmp_path / "rechnung.txt"
        path.write_text(INVOICE_TEXT, encoding="utf-8")

        record = extract_invoice_from_file(path)
        assert record.invoice_number == "RE1001"
        assert record.gross_amount == "178.50€"

    def test_pdf_file(self, mock_pdf_open):
        record = extract_invoice_from_file(Path("rechnung.pdf"))
        assert record.invoice_number == "RE1001"
        assert record.net_amount == "150.00€"

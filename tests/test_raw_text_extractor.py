"""
Unit tests for the RawTextExtractor module.

pdfplumber is patched so no real PDF files are needed.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from batch_summarizer.errors import TextExtractionFailure
from batch_summarizer.extraction import RawTextExtractor


def fake_pdf(*page_texts):
    """Context-manager mock standing in for pdfplumber.open(...)."""
    pdf = MagicMock()
    pdf.pages = [Mock(extract_text=Mock(return_value=text)) for text in page_texts]
    opened = MagicMock()
    opened.__enter__.return_value = pdf
    return opened


class TestRawTextExtractor:
    """Tests for RawTextExtractor class."""

    @pytest.fixture
    def extractor(self):
        return RawTextExtractor()

    @pytest.fixture
    def pdf_file(self, tmp_path):
        path = tmp_path / "doc.pdf"
        path.write_bytes(b"%PDF-1.4 fake")
        return path

    def test_reads_text_file(self, extractor, tmp_path):
        path = tmp_path / "notes.TXT"
        path.write_text("Line one.\nLine two.", encoding='utf-8')

        assert extractor.extract_text(path) == "Line one.\nLine two."

    def test_invalid_utf8_bytes_are_ignored(self, extractor, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_bytes(b"caf\xff\xfe text")

        assert extractor.extract_text(path) == "caf text"

    def test_missing_file(self, extractor, tmp_path):
        with pytest.raises(TextExtractionFailure, match="File not found"):
            extractor.extract_text(tmp_path / "gone.txt")

    def test_unsupported_extension(self, extractor, tmp_path):
        path = tmp_path / "slides.pptx"
        path.write_bytes(b"data")

        with pytest.raises(TextExtractionFailure, match="Unsupported file type"):
            extractor.extract_text(path)

    def test_file_over_size_limit(self, tmp_path):
        path = tmp_path / "big.txt"
        path.write_text("x" * 2048, encoding='utf-8')

        with pytest.raises(TextExtractionFailure, match="maximum size"):
            RawTextExtractor(max_file_size_mb=0.001).extract_text(path)

    @patch('batch_summarizer.extraction.raw_text_extractor.pdfplumber.open')
    def test_pdf_pages_are_joined(self, mock_open, extractor, pdf_file):
        mock_open.return_value = fake_pdf("Page one", None, "Page three")

        assert extractor.extract_text(pdf_file) == "Page one\nPage three\n"

    @patch('batch_summarizer.extraction.raw_text_extractor.pdfplumber.open')
    def test_scanned_pdf_yields_empty_text(self, mock_open, extractor, pdf_file):
        mock_open.return_value = fake_pdf(None, "")

        assert extractor.extract_text(pdf_file) == ""

    @patch('batch_summarizer.extraction.raw_text_extractor.pdfplumber.open')
    def test_pdf_without_pages(self, mock_open, extractor, pdf_file):
        mock_open.return_value = fake_pdf()

        with pytest.raises(TextExtractionFailure, match="no pages"):
            extractor.extract_text(pdf_file)

    @pytest.mark.parametrize("message, expected", [
        ("File has not been decrypted: password required", "password-protected"),
        ("Invalid xref table", "corrupted"),
        ("something odd", "Failed to extract PDF text"),
    ])
    @patch('batch_summarizer.extraction.raw_text_extractor.pdfplumber.open')
    def test_pdf_errors_are_categorized(self, mock_open, message, expected, extractor, pdf_file):
        mock_open.side_effect = Exception(message)

        with pytest.raises(TextExtractionFailure, match=expected):
            extractor.extract_text(pdf_file)

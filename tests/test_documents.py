"""
Tests for document discovery and summary naming.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from batch_summarizer.documents import (
    DocumentKind,
    discover_documents,
    summary_filename_for,
)


@pytest.fixture
def docs_folder(tmp_path):
    folder = tmp_path / "docs"
    folder.mkdir()
    return folder


class TestDocumentKind:

    @pytest.mark.parametrize("filename, kind", [
        ("a.pdf", DocumentKind.PDF),
        ("a.PDF", DocumentKind.PDF),
        ("notes.txt", DocumentKind.TEXT),
        ("notes.TxT", DocumentKind.TEXT),
        ("image.png", None),
        ("README", None),
    ])
    def test_from_filename(self, filename, kind):
        assert DocumentKind.from_filename(filename) is kind


class TestSummaryFilename:

    @pytest.mark.parametrize("filename, expected", [
        ("report.pdf", "report.txt"),
        ("Report.PDF", "Report.txt"),
        ("notes.txt", "notes.txt"),
        ("archive.2023.pdf", "archive.2023.txt"),
    ])
    def test_summary_filename_for(self, filename, expected):
        assert summary_filename_for(filename) == expected


class TestDiscoverDocuments:

    def test_only_supported_regular_files_are_listed(self, docs_folder):
        (docs_folder / "b.pdf").write_bytes(b"%PDF")
        (docs_folder / "a.txt").write_text("text", encoding='utf-8')
        (docs_folder / "c.docx").write_bytes(b"docx")
        (docs_folder / "folder.pdf").mkdir()

        documents = discover_documents(docs_folder)

        assert [doc.filename for doc in documents] == ["a.txt", "b.pdf"]
        assert documents[1].kind is DocumentKind.PDF
        assert documents[1].path == docs_folder / "b.pdf"
        assert documents[1].summary_filename == "b.txt"

    def test_names_sharing_a_summary_keep_the_first(self, docs_folder):
        (docs_folder / "same.pdf").write_bytes(b"%PDF")
        (docs_folder / "same.txt").write_text("text", encoding='utf-8')

        documents = discover_documents(docs_folder)

        assert [doc.filename for doc in documents] == ["same.pdf"]

    def test_missing_folder_raises(self, tmp_path):
        with pytest.raises(OSError):
            discover_documents(tmp_path / "nope")

"""
Raw Text Extraction Module

Extracts raw text from source documents:
- PDF: digital text layer via pdfplumber (page by page)
- TXT: read directly as UTF-8

Problems are raised as TextExtractionFailure so the batch driver can skip
the document without affecting its siblings.

This module can be used standalone via command line:
    python -m batch_summarizer.extraction.raw_text_extractor docs/report.pdf
"""

import argparse
import sys
from pathlib import Path

import pdfplumber

from batch_summarizer.config import DEBUG_MODE, LARGE_FILE_WARNING_MB, MAX_FILE_SIZE_MB
from batch_summarizer.documents import DocumentKind
from batch_summarizer.errors import TextExtractionFailure
from batch_summarizer.logging_config import Timer, debug, warning


class RawTextExtractor:
    """
    Extracts text from PDF and TXT files.

    Example:
        extractor = RawTextExtractor()
        text = extractor.extract_text(Path("docs/report.pdf"))
    """

    def __init__(self, max_file_size_mb: float = MAX_FILE_SIZE_MB):
        self.max_file_size_mb = max_file_size_mb

    def extract_text(self, file_path: Path | str) -> str:
        """
        Extract the full text of a document.

        Args:
            file_path: Path to a .pdf or .txt file

        Returns:
            Extracted text (may be empty if the document has no text layer)

        Raises:
            TextExtractionFailure: If the file is missing, too large,
                unsupported, unreadable or cannot be parsed
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise TextExtractionFailure(f"File not found: {file_path}")

        size_mb = file_path.stat().st_size / (1024 * 1024)
        if size_mb > self.max_file_size_mb:
            raise TextExtractionFailure(
                f"File exceeds maximum size ({self.max_file_size_mb}MB). File size: {size_mb:.1f}MB"
            )
        if size_mb > LARGE_FILE_WARNING_MB:
            warning(f"Large file detected ({size_mb:.1f}MB). Processing may take longer.")

        kind = DocumentKind.from_filename(file_path.name)
        if kind is DocumentKind.PDF:
            with Timer(f"PDF text extraction ({file_path.name})"):
                return self._extract_pdf_text(file_path)
        if kind is DocumentKind.TEXT:
            return self._read_text_file(file_path)

        raise TextExtractionFailure(
            f"Unsupported file type: {file_path.suffix.lower()}. Supported formats: PDF, TXT"
        )

    def _read_text_file(self, file_path: Path) -> str:
        """Read a plain text file."""
        debug(f"Processing as text file: {file_path.name}")
        try:
            with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
                return f.read()
        except OSError as e:
            raise TextExtractionFailure(f"Failed to read text file: {e}") from e

    def _extract_pdf_text(self, file_path: Path) -> str:
        """
        Extract the digital text layer of a PDF using pdfplumber.

        Pages without extractable text are skipped; a scanned PDF therefore
        yields an empty string rather than an error.
        """
        debug(f"Processing as PDF: {file_path.name}")
        text = ""

        try:
            with pdfplumber.open(file_path) as pdf:
                page_count = len(pdf.pages)
                debug(f"PDF has {page_count} pages")

                if page_count == 0:
                    raise TextExtractionFailure("PDF has no pages")

                for i, page in enumerate(pdf.pages, 1):
                    if DEBUG_MODE and i % 10 == 0:
                        debug(f"Extracting page {i}/{page_count}")

                    page_text = page.extract_text()
                    if page_text:
                        text += page_text + "\n"

        except TextExtractionFailure:
            raise
        except Exception as e:
            error_msg = str(e).lower()

            # Categorize error types
            if "password" in error_msg or "encrypted" in error_msg:
                raise TextExtractionFailure("PDF is password-protected or encrypted") from e
            if "damaged" in error_msg or "corrupt" in error_msg or "invalid" in error_msg:
                raise TextExtractionFailure("PDF file appears to be corrupted or damaged") from e
            raise TextExtractionFailure(f"Failed to extract PDF text: {e}") from e

        return text


def main():
    """Print the extracted text of one document (debugging aid)."""
    parser = argparse.ArgumentParser(
        description="Extract raw text from a PDF or TXT document."
    )
    parser.add_argument('file', help="Path to the document")
    parser.add_argument('--max-chars', type=int, default=2000,
                        help="Print at most this many characters (0 = all)")
    args = parser.parse_args()

    try:
        text = RawTextExtractor().extract_text(args.file)
    except TextExtractionFailure as e:
        print(f"Extraction failed: {e}", file=sys.stderr)
        return 1

    print(f"Extracted {len(text)} characters")
    print(text if args.max_chars == 0 else text[:args.max_chars])
    return 0


if __name__ == "__main__":
    sys.exit(main())

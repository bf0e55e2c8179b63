"""
Document model and folder discovery.

A Document is identified by its filename inside the docs folder. Its kind
comes from the (case-insensitive) extension; anything else in the folder
is ignored. Text is not stored here: it is extracted on demand and
dropped once the summary is written.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from batch_summarizer.config import SUMMARY_EXTENSION, SUPPORTED_EXTENSIONS
from batch_summarizer.logging_config import debug_log, warning


class DocumentKind(Enum):
    PDF = 'PDF'
    TEXT = 'TEXT'

    @classmethod
    def from_filename(cls, filename: str) -> 'DocumentKind | None':
        """Kind for a filename, or None if the extension is not supported."""
        kind_name = SUPPORTED_EXTENSIONS.get(Path(filename).suffix.lower())
        return cls(kind_name) if kind_name else None


@dataclass(frozen=True)
class Document:
    """
    A source document discovered in the docs folder.

    Attributes:
        filename: Name inside the docs folder (e.g. "report.PDF").
        path: Full path to the file.
        kind: PDF or TEXT.
    """
    filename: str
    path: Path
    kind: DocumentKind

    @property
    def summary_filename(self) -> str:
        """Output name: original base name with the fixed summary extension."""
        return summary_filename_for(self.filename)


def summary_filename_for(filename: str) -> str:
    return Path(filename).stem + SUMMARY_EXTENSION


def discover_documents(docs_folder: Path) -> list[Document]:
    """
    List supported documents in a folder, sorted by filename.

    Two documents that would share one summary file (e.g. "a.pdf" and
    "a.txt") cannot both be tracked; only the first in sorted order is kept.

    Args:
        docs_folder: Folder to scan (not recursive).

    Returns:
        Documents in processing order.

    Raises:
        OSError: If the folder cannot be listed.
    """
    documents = []
    seen_summaries: dict[str, str] = {}

    for entry in sorted(Path(docs_folder).iterdir(), key=lambda p: p.name):
        if not entry.is_file():
            continue

        kind = DocumentKind.from_filename(entry.name)
        if kind is None:
            continue

        summary_name = summary_filename_for(entry.name)
        if summary_name in seen_summaries:
            warning(
                f"Skipping {entry.name}: its summary name {summary_name} "
                f"is already used by {seen_summaries[summary_name]}"
            )
            continue

        seen_summaries[summary_name] = entry.name
        documents.append(Document(filename=entry.name, path=entry, kind=kind))

    debug_log(f"[DISCOVERY] {len(documents)} supported documents in {docs_folder}")
    return documents

"""
Result Types for Batch Summarization

Simple dataclasses that carry the outcome of each processing stage.

Key Types:
    DocumentSummaryResult - Result from summarizing one document's text
    DocumentOutcome - Final state of one document in a batch run
    BatchRunResult - Totals for a whole run

Usage:
    result = DocumentSummaryResult(
        filename="report.pdf",
        summary="The report describes...",
        chunk_count=3,
        generation_calls=4,
        processing_time_seconds=45.2
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class DocumentSummaryResult:
    """
    Result from summarizing a single document.

    Attributes:
        filename: Source filename (for logging; may be empty).
        summary: Final formatted summary (empty on failure).
        chunk_count: Chunks the text was split into (1 for single-shot).
        generation_calls: Requests sent to the generation backend.
        processing_time_seconds: Time taken to summarize.
        success: Whether summarization completed.
        error_kind: GenerationError.kind, or "cancelled", when success is False.
        error_message: Error description if success is False.
    """
    filename: str
    summary: str
    chunk_count: int
    generation_calls: int
    processing_time_seconds: float
    success: bool = True
    error_kind: str | None = None
    error_message: str | None = None

    def __post_init__(self):
        """Validate that failed results have an error message."""
        if not self.success and not self.error_message:
            self.error_message = "Unknown error during document summarization"

    @property
    def hierarchical(self) -> bool:
        """True if the document went through chunk summaries plus a final pass."""
        return self.chunk_count > 1 or self.generation_calls > 1


class DocumentOutcome(Enum):
    """Terminal state of one discovered document within a run."""
    SKIPPED_EXISTING = 'skipped_existing'
    EXTRACTION_FAILED = 'extraction_failed'
    COMPLETED = 'completed'
    FAILED = 'failed'
    CANCELLED = 'cancelled'


@dataclass
class BatchRunResult:
    """
    Totals for one batch run.

    Attributes:
        outcomes: Filename -> DocumentOutcome for every discovered document.
        document_order: Discovered filenames in processing order.
        total_processing_time_seconds: Wall-clock time for the run.
        cancelled: True if the run stopped early on request.
        aborted: True if orchestration failed (folder setup, discovery).
        error_message: Description of the orchestration failure.
    """
    outcomes: dict[str, DocumentOutcome] = field(default_factory=dict)
    document_order: list[str] = field(default_factory=list)
    total_processing_time_seconds: float = 0.0
    cancelled: bool = False
    aborted: bool = False
    error_message: str | None = None

    def count(self, outcome: DocumentOutcome) -> int:
        return sum(1 for value in self.outcomes.values() if value is outcome)

    def filenames_with(self, outcome: DocumentOutcome) -> list[str]:
        return [name for name in self.document_order if self.outcomes.get(name) is outcome]

    @property
    def documents_completed(self) -> int:
        return self.count(DocumentOutcome.COMPLETED)

    @property
    def documents_failed(self) -> int:
        return self.count(DocumentOutcome.FAILED) + self.count(DocumentOutcome.EXTRACTION_FAILED)

    @property
    def documents_skipped(self) -> int:
        return self.count(DocumentOutcome.SKIPPED_EXISTING)

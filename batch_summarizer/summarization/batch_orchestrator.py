"""
Batch Orchestrator - Resumable Folder Summarization

Coordinates a whole run over the docs folder:

1. Setup: make sure the docs and summaries folders exist
2. Discovery: list supported documents (PDF/TXT, case-insensitive)
3. Pre-filter: skip every document whose summary file already exists
4. Processing: extract -> summarize -> persist, one isolated failure
   domain per document
5. Report: counts and total processing time

Resumability comes entirely from step 3. No progress state is saved: a
document is complete iff its summary file exists, so rerunning after a
crash, an interrupt or a failed request only picks up what is missing.

Execution mode:
- max_concurrency == 1: documents run strictly one after another
- max_concurrency > 1: consecutive batches of max_concurrency documents;
  each batch runs concurrently and finishes completely before the next

Per-document states:
    Discovered -> SKIPPED_EXISTING
               -> EXTRACTION_FAILED
               -> Summarizing -> COMPLETED | FAILED | CANCELLED

Usage:
    from batch_summarizer.config import load_config
    from batch_summarizer.summarization import BatchSummarizer

    summarizer = BatchSummarizer(load_config())
    result = summarizer.run()
    print(result.documents_completed)
"""

from __future__ import annotations

import threading
import time
from datetime import datetime
from typing import TYPE_CHECKING

from batch_summarizer.ai.ollama_client import OllamaClient
from batch_summarizer.documents import Document, discover_documents
from batch_summarizer.errors import TextExtractionFailure
from batch_summarizer.extraction import RawTextExtractor
from batch_summarizer.logging_config import debug_log, error, format_duration, info, warning
from batch_summarizer.parallel import ExecutorStrategy, ParallelTaskRunner, create_strategy

from .document_summarizer import CANCELLED_KIND, DocumentSummarizer, HierarchicalDocumentSummarizer
from .result_types import BatchRunResult, DocumentOutcome
from .summary_store import SummaryStore

if TYPE_CHECKING:
    from batch_summarizer.config import SummarizerConfig

RESTART_HINT = "You can restart the script to continue from where it left off"


class BatchSummarizer:
    """
    Runs the document-to-summary pipeline over a folder.

    All collaborators can be injected; by default they are built from the
    configuration (OllamaClient, HierarchicalDocumentSummarizer,
    RawTextExtractor, SummaryStore, and a strategy matching
    max_concurrency).

    Attributes:
        config: Run configuration.
        document_summarizer: Turns extracted text into a summary.
        extractor: Reads document text.
        store: Summary result store.
        strategy: ExecutorStrategy override (None = from max_concurrency).
    """

    def __init__(
        self,
        config: SummarizerConfig,
        document_summarizer: DocumentSummarizer | None = None,
        extractor: RawTextExtractor | None = None,
        store: SummaryStore | None = None,
        strategy: ExecutorStrategy | None = None,
        cancel_event: threading.Event | None = None
    ):
        self.config = config
        self.document_summarizer = document_summarizer or HierarchicalDocumentSummarizer(
            config, OllamaClient(config)
        )
        self.extractor = extractor or RawTextExtractor()
        self.store = store or SummaryStore(config.summaries_folder)
        self.strategy = strategy

        # Cancellation token, checked between documents and before each generation call
        self._stop_event = cancel_event or threading.Event()

    def stop(self):
        """Request cancellation: no new document or generation call starts."""
        self._stop_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._stop_event.is_set()

    def run(self) -> BatchRunResult:
        """
        Process every document in the docs folder that has no summary yet.

        Returns:
            BatchRunResult with the outcome of each discovered document.
        """
        start_time = time.time()
        result = BatchRunResult()
        self._log_banner()

        try:
            self._process_folder(result)
        except Exception as e:
            result.aborted = True
            result.error_message = str(e)
            error(f"Error during processing: {e}", exc_info=True)
            info(RESTART_HINT)

        result.total_processing_time_seconds = time.time() - start_time
        info(f"Total processing time: {format_duration(result.total_processing_time_seconds)}")
        return result

    def _process_folder(self, result: BatchRunResult):
        self.config.docs_folder.mkdir(parents=True, exist_ok=True)
        self.store.ensure_folder()

        documents = discover_documents(self.config.docs_folder)
        result.document_order = [doc.filename for doc in documents]

        if not documents:
            info("No PDF or TXT files found in docs folder")
            return

        info(f"Found {len(documents)} document files to process")

        pending = self._filter_pending(documents, result)
        info(f"{len(pending)} files need processing")
        info(f"{result.documents_skipped} files already have summaries")

        if not pending:
            info("All files have been processed!")
            return

        for task_result in self._execute(pending):
            if task_result.success:
                result.outcomes[task_result.task_id] = task_result.result
            else:
                error(f"Error processing {task_result.task_id}: {task_result.error}")
                result.outcomes[task_result.task_id] = DocumentOutcome.FAILED

        # Documents never started because of cancellation
        for doc in pending:
            result.outcomes.setdefault(doc.filename, DocumentOutcome.CANCELLED)

        result.cancelled = self.is_cancelled
        self._log_summary(result)

    def _filter_pending(self, documents: list[Document], result: BatchRunResult) -> list[Document]:
        """Documents without a summary; the rest are recorded as skipped."""
        pending = []
        for doc in documents:
            if self.store.exists(doc.filename):
                result.outcomes[doc.filename] = DocumentOutcome.SKIPPED_EXISTING
            else:
                pending.append(doc)
        return pending

    def _execute(self, pending: list[Document]):
        if self.strategy is not None:
            return self._run_batches(self.strategy, pending)
        with create_strategy(self.config.max_concurrency) as strategy:
            return self._run_batches(strategy, pending)

    def _run_batches(self, strategy: ExecutorStrategy, pending: list[Document]):
        runner = ParallelTaskRunner(strategy=strategy, cancel_event=self._stop_event)
        items = [(doc.filename, doc) for doc in pending]

        debug_log(f"[BATCH] {len(items)} documents, batch size {self.config.max_concurrency}")
        return runner.run_in_batches(
            self.process_document,
            items,
            batch_size=self.config.max_concurrency
        )

    def process_document(self, doc: Document) -> DocumentOutcome:
        """
        Extract, summarize and persist one document.

        Never raises: any failure is logged with the document name and
        reported as an outcome, so sibling documents are unaffected.
        """
        filename = doc.filename
        info(f"Processing: {filename}")

        try:
            if self.store.exists(filename):
                info(f"Summary already exists for {filename}, skipping")
                return DocumentOutcome.SKIPPED_EXISTING

            if self.is_cancelled:
                return DocumentOutcome.CANCELLED

            info(f"Extracting text from {filename}...")
            text = self._extract_text(doc)
            if not text or not text.strip():
                error(f"Failed to extract text from {filename}")
                return DocumentOutcome.EXTRACTION_FAILED

            info(f"Text extracted ({len(text)} characters)")
            info(f"Generating summary for {filename}...")

            summary_result = self.document_summarizer.summarize(
                text,
                filename=filename,
                stop_check=lambda: self._stop_event.is_set()
            )

            if not summary_result.success:
                if summary_result.error_kind == CANCELLED_KIND:
                    info(f"Cancelled: {filename}")
                    return DocumentOutcome.CANCELLED
                error(f"Error processing {filename}: {summary_result.error_message}")
                return DocumentOutcome.FAILED

            # Mid-flight documents are retried from scratch on the next run
            if self.is_cancelled:
                info(f"Cancelled: {filename} (summary discarded)")
                return DocumentOutcome.CANCELLED

            summary = summary_result.summary
            if len(summary) > self.config.max_summary_length:
                warning(
                    f"Summary for {filename} exceeds {self.config.max_summary_length} "
                    f"characters ({len(summary)})"
                )

            summary_path = self.store.write(filename, summary)
            info(f"Summary saved: {summary_path} ({len(summary)} characters)")
            info(f"Completed: {filename}")
            return DocumentOutcome.COMPLETED

        except Exception as e:
            error(f"Error processing {filename}: {e}", exc_info=True)
            return DocumentOutcome.FAILED

    def _extract_text(self, doc: Document) -> str | None:
        try:
            return self.extractor.extract_text(doc.path)
        except TextExtractionFailure as e:
            error(f"Error extracting text from {doc.path}: {e}")
            return None

    def _log_banner(self):
        config = self.config
        info("Starting Batch Document Summarizer")
        info(f"Docs folder: {config.docs_folder}")
        info(f"Summaries folder: {config.summaries_folder}")
        info(f"Model: {config.model}")
        info(f"Concurrency: {config.max_concurrency}")
        info(f"Timeout: {config.timeout_seconds:g}s per request")
        info(f"Max summary length: {config.max_summary_length} characters")
        info("Supported formats: PDF, TXT")
        info(f"Started processing at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    def _log_summary(self, result: BatchRunResult):
        if result.cancelled:
            not_done = result.count(DocumentOutcome.CANCELLED)
            warning(f"Processing cancelled: {not_done} documents left for the next run")
        else:
            info(
                f"Finished: {result.documents_completed} completed, "
                f"{result.documents_failed} failed"
            )
        info(f"Finished processing at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

"""
Document Summarizer - Single-Shot and Hierarchical Summarization

Turns the extracted text of one document into a summary.

Decision rule:
- Chunking disabled, or text length <= chunk_size_threshold:
      one generation call with the "document_summary" template,
      then a full formatting pass.
- Otherwise (map-reduce):
      1. split the text with ChunkSplitter
      2. summarize each chunk in order with the "chunk_summary" template
         (responses are only stripped, not formatted)
      3. join the chunk summaries with blank lines
      4. one more call with the "final_summary" template over the joined text
      5. full formatting pass on the final response

Generation failures come back as GenerationResult values. The first
failure ends the document: no further calls are made and a failed
DocumentSummaryResult carries the error kind back to the batch driver.

Usage:
    summarizer = HierarchicalDocumentSummarizer(config, OllamaClient(config))
    result = summarizer.summarize(text, filename="report.pdf")
    if result.success:
        print(result.summary)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Protocol

from batch_summarizer.ai.summary_formatter import SummaryFormatter
from batch_summarizer.chunking_engine import ChunkSplitter
from batch_summarizer.errors import GENERATION_ERRORS_BY_KIND, InvalidResponse, SummarizerError
from batch_summarizer.logging_config import debug_log, info

from .result_types import DocumentSummaryResult

if TYPE_CHECKING:
    from batch_summarizer.ai.ollama_client import GenerationResult
    from batch_summarizer.config import SummarizerConfig

CANCELLED_KIND = "cancelled"
EMPTY_TEXT_KIND = "empty_text"


class TextGenerator(Protocol):
    """Anything that turns a prompt into a GenerationResult (OllamaClient in production)."""

    def generate(self, prompt: str) -> GenerationResult:
        ...


class DocumentSummarizer(ABC):
    """
    Abstract base class for document summarization.

    Defines the interface the batch driver depends on, so other strategies
    can be swapped in without changing the calling code.
    """

    @abstractmethod
    def summarize(
        self,
        text: str,
        filename: str = "",
        stop_check: Callable[[], bool] | None = None
    ) -> DocumentSummaryResult:
        """
        Summarize a single document.

        Args:
            text: Full document text to summarize.
            filename: Original filename (for logging).
            stop_check: Optional callable that returns True if processing should stop.

        Returns:
            DocumentSummaryResult with the summary and metadata.
        """

    def summarize_document(self, text: str) -> str:
        """
        Summarize text and return the summary, raising on failure.

        Raises:
            GenerationError subclass matching the failure, or
            SummarizerError for empty text and cancellation.
        """
        result = self.summarize(text)
        if result.success:
            return result.summary
        raise _exception_for(result)


class HierarchicalDocumentSummarizer(DocumentSummarizer):
    """
    Summarizes small documents in one call and large ones by map-reduce.

    Attributes:
        config: Run configuration (thresholds, length targets, templates).
        generator: TextGenerator used for every call.
        splitter: ChunkSplitter bound to config.chunking.max_tokens_per_chunk.
        formatter: SummaryFormatter for the full formatting pass.
    """

    def __init__(
        self,
        config: SummarizerConfig,
        generator: TextGenerator,
        formatter: SummaryFormatter | None = None
    ):
        self.config = config
        self.generator = generator
        self.splitter = ChunkSplitter(config.chunking.max_tokens_per_chunk)
        self.formatter = formatter or SummaryFormatter()

    def needs_chunking(self, text: str) -> bool:
        chunking = self.config.chunking
        return chunking.enabled and len(text) > chunking.chunk_size_threshold

    def summarize(
        self,
        text: str,
        filename: str = "",
        stop_check: Callable[[], bool] | None = None
    ) -> DocumentSummaryResult:
        start_time = time.time()

        if not text or not text.strip():
            return DocumentSummaryResult(
                filename=filename,
                summary="",
                chunk_count=0,
                generation_calls=0,
                processing_time_seconds=0.0,
                success=False,
                error_kind=EMPTY_TEXT_KIND,
                error_message="Document text is empty"
            )

        if self.needs_chunking(text):
            info(f"{filename}: document size {len(text)} characters - splitting into chunks")
            result = self._summarize_hierarchical(text, filename, stop_check)
        else:
            info(f"{filename}: document size {len(text)} characters - processing as single chunk")
            result = self._summarize_single(text, filename, stop_check)

        result.processing_time_seconds = time.time() - start_time
        return result

    def _summarize_single(
        self,
        text: str,
        filename: str,
        stop_check: Callable[[], bool] | None
    ) -> DocumentSummaryResult:
        if stop_check and stop_check():
            return _cancelled(filename, chunk_count=1, calls=0)

        response = self._generate('document_summary', self.config.max_summary_length, text)
        if not response.success:
            return _failed(filename, 1, 1, response.error_kind, response.error_message)

        return self._finish(filename, response.text, chunk_count=1, calls=1)

    def _summarize_hierarchical(
        self,
        text: str,
        filename: str,
        stop_check: Callable[[], bool] | None
    ) -> DocumentSummaryResult:
        chunks = self.splitter.split(text)
        chunk_count = len(chunks)
        info(f"{filename}: split into {chunk_count} chunks")

        chunk_summaries = []
        calls = 0

        for chunk in chunks:
            if stop_check and stop_check():
                return _cancelled(filename, chunk_count, calls)

            info(f"{filename}: summarizing chunk {chunk.chunk_num}/{chunk_count} ({chunk.char_count} characters)...")
            response = self._generate(
                'chunk_summary',
                self.config.chunking.max_chunk_summary_length,
                chunk.text
            )
            calls += 1
            if not response.success:
                return _failed(filename, chunk_count, calls, response.error_kind, response.error_message)

            chunk_summaries.append(response.text.strip())

        if stop_check and stop_check():
            return _cancelled(filename, chunk_count, calls)

        info(f"{filename}: generating final summary from {chunk_count} chunk summaries...")
        combined_summaries = "\n\n".join(chunk_summaries)
        response = self._generate('final_summary', self.config.max_summary_length, combined_summaries)
        calls += 1
        if not response.success:
            return _failed(filename, chunk_count, calls, response.error_kind, response.error_message)

        return self._finish(filename, response.text, chunk_count=chunk_count, calls=calls)

    def _generate(self, template_name: str, max_length: int, payload: str) -> GenerationResult:
        prompt = self.config.render_prompt(template_name, max_length, payload)
        debug_log(f"[DOC SUMMARIZER] {template_name} prompt: {len(prompt)} chars")
        return self.generator.generate(prompt)

    def _finish(self, filename: str, raw_summary: str, chunk_count: int, calls: int) -> DocumentSummaryResult:
        summary = self.formatter.format(raw_summary)
        if not summary:
            return _failed(
                filename, chunk_count, calls,
                InvalidResponse.kind, "Summary is empty after formatting"
            )

        return DocumentSummaryResult(
            filename=filename,
            summary=summary,
            chunk_count=chunk_count,
            generation_calls=calls,
            processing_time_seconds=0.0
        )


def _failed(filename: str, chunk_count: int, calls: int, kind: str | None, message: str | None) -> DocumentSummaryResult:
    return DocumentSummaryResult(
        filename=filename,
        summary="",
        chunk_count=chunk_count,
        generation_calls=calls,
        processing_time_seconds=0.0,
        success=False,
        error_kind=kind,
        error_message=message
    )


def _cancelled(filename: str, chunk_count: int, calls: int) -> DocumentSummaryResult:
    return _failed(filename, chunk_count, calls, CANCELLED_KIND, "Processing cancelled")


def _exception_for(result: DocumentSummaryResult) -> SummarizerError:
    error_cls = GENERATION_ERRORS_BY_KIND.get(result.error_kind)
    if error_cls is None:
        return SummarizerError(result.error_message)
    return error_cls(result.error_message)

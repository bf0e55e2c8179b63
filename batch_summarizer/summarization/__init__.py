"""
Summarization Package - Unified API for Folder Summarization.

    from batch_summarizer.summarization import (
        # Folder-level
        BatchSummarizer, BatchRunResult, DocumentOutcome,
        # Document-level
        HierarchicalDocumentSummarizer, DocumentSummaryResult,
    )

Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │  BatchSummarizer (discovery, skip-existing, batches)        │
    │            ↓                                                │
    │  RawTextExtractor → HierarchicalDocumentSummarizer          │
    │            ↓                                                │
    │  ChunkSplitter → Ollama → chunk summaries → final summary   │
    │            ↓                                                │
    │  SummaryFormatter → SummaryStore (<stem>.txt)               │
    └─────────────────────────────────────────────────────────────┘
"""

# Result types
from .result_types import (
    BatchRunResult,
    DocumentOutcome,
    DocumentSummaryResult,
)

# Document summarizers
from .document_summarizer import (
    DocumentSummarizer,
    HierarchicalDocumentSummarizer,
    TextGenerator,
)

# Result store and folder-level driver
from .summary_store import SummaryStore
from .batch_orchestrator import BatchSummarizer

__all__ = [
    # Result types
    'BatchRunResult',
    'DocumentOutcome',
    'DocumentSummaryResult',
    # Document summarizer
    'DocumentSummarizer',
    'HierarchicalDocumentSummarizer',
    'TextGenerator',
    # Folder-level
    'SummaryStore',
    'BatchSummarizer',
]

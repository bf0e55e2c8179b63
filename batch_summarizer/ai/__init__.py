"""
Batch Summarizer AI Module
Handles text generation via Ollama and formatting of generated summaries.

Ollama is the only backend: it runs locally as a standalone service, so
the Python side needs nothing beyond the requests library for API calls.
"""

from .ollama_client import GenerationResult, OllamaClient
from .summary_formatter import (
    PARAGRAPH_SOFT_LIMIT,
    SummaryFormatter,
    clean_summary_format,
)

__all__ = [
    'GenerationResult',
    'OllamaClient',
    'PARAGRAPH_SOFT_LIMIT',
    'SummaryFormatter',
    'clean_summary_format',
]

"""
Extraction Package

Reads the text of source documents (PDF/TXT) for summarization.
"""

from batch_summarizer.extraction.raw_text_extractor import RawTextExtractor

__all__ = ['RawTextExtractor']

"""
Document Chunking Engine

Splits oversized document text into size-bounded chunks that respect
sentence boundaries, so each chunk can be summarized on its own.

Sizes are expressed in model "tokens" but measured in characters: one
token is estimated as CHARS_PER_TOKEN characters. This is a heuristic for
English text, not an exact token count for any particular model.
"""

import re
from dataclasses import dataclass

from batch_summarizer.config import MAX_TOKENS_PER_CHUNK
from batch_summarizer.logging_config import debug_log

# Rough estimation: 1 token ≈ 4 characters for English text
CHARS_PER_TOKEN = 4

# A sentence ends at '.', '!' or '?' followed by whitespace
SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')


@dataclass
class Chunk:
    """Represents a single text chunk with its position in the document."""
    chunk_num: int
    text: str

    @property
    def char_count(self) -> int:
        return len(self.text)


def max_chars_for_tokens(max_tokens: int) -> int:
    """Convert a token budget into the approximate character budget."""
    return max_tokens * CHARS_PER_TOKEN


def split_into_sentences(text: str) -> list[str]:
    """Split text at sentence terminators followed by whitespace."""
    return SENTENCE_BOUNDARY.split(text)


def split_text_into_chunks(text: str, max_tokens_per_chunk: int = MAX_TOKENS_PER_CHUNK) -> list[str]:
    """
    Split text into chunks of at most ~max_tokens_per_chunk tokens.

    Text that already fits is returned unchanged as a single chunk.
    Otherwise sentences are packed greedily into chunks. A sentence is
    never broken: one that is longer than the budget on its own becomes
    an oversized chunk.

    Args:
        text: Document text.
        max_tokens_per_chunk: Token budget per chunk (converted to characters).

    Returns:
        Chunks in document order.
    """
    max_chars = max_chars_for_tokens(max_tokens_per_chunk)

    if len(text) <= max_chars:
        return [text]

    chunks = []
    current_chunk = ''

    for sentence in split_into_sentences(text):
        if len(current_chunk + sentence) > max_chars and current_chunk:
            chunks.append(current_chunk.strip())
            current_chunk = sentence
        else:
            current_chunk += (' ' if current_chunk else '') + sentence

    if current_chunk.strip():
        chunks.append(current_chunk.strip())

    debug_log(f"[CHUNKING] {len(text)} chars -> {len(chunks)} chunks (budget {max_chars} chars)")
    return chunks


class ChunkSplitter:
    """
    Sentence-aligned splitter bound to a fixed token budget.

    Example:
        splitter = ChunkSplitter(max_tokens_per_chunk=100000)
        for chunk in splitter.split(text):
            print(chunk.chunk_num, chunk.char_count)
    """

    def __init__(self, max_tokens_per_chunk: int = MAX_TOKENS_PER_CHUNK):
        if max_tokens_per_chunk <= 0:
            raise ValueError("max_tokens_per_chunk must be positive")
        self.max_tokens_per_chunk = max_tokens_per_chunk

    @property
    def max_chars(self) -> int:
        return max_chars_for_tokens(self.max_tokens_per_chunk)

    def needs_splitting(self, text: str) -> bool:
        return len(text) > self.max_chars

    def split(self, text: str) -> list[Chunk]:
        """Split text into numbered chunks (1-indexed)."""
        return [
            Chunk(chunk_num=i, text=chunk_text)
            for i, chunk_text in enumerate(split_text_into_chunks(text, self.max_tokens_per_chunk), 1)
        ]

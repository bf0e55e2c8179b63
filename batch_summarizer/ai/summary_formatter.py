"""
Summary Formatter

Normalizes raw model output into flowing paragraphs. Models are asked for
prose but still emit bullet lists, numbered lists and bold markup; this
pass removes them and re-flows the text.

The formatter is pure and deterministic, and formatting an already
formatted summary returns it unchanged.
"""

import re

# Approximate character cap per paragraph (soft: one long sentence may exceed it)
PARAGRAPH_SOFT_LIMIT = 200

_BULLET_MARKERS = re.compile(r'^\s*[\*\-•]\s*', re.MULTILINE)
_NUMBERED_MARKERS = re.compile(r'^\s*\d+\.\s*', re.MULTILINE)
_LETTERED_MARKERS = re.compile(r'^\s*[a-z]\)\s*', re.MULTILINE)
_BOLD_MARKERS = re.compile(r'\*\*')
_BLANK_LINE_RUNS = re.compile(r'\n\s*\n')
_SENTENCE_TERMINATORS = re.compile(r'[.!?]+')


def strip_markup(summary: str) -> str:
    """Remove list markers and bold markup; collapse blank-line runs."""
    cleaned = _BULLET_MARKERS.sub('', summary)
    cleaned = _NUMBERED_MARKERS.sub('', cleaned)
    cleaned = _LETTERED_MARKERS.sub('', cleaned)
    cleaned = _BOLD_MARKERS.sub('', cleaned)
    cleaned = _BLANK_LINE_RUNS.sub('\n\n', cleaned)
    return cleaned.strip()


def split_sentences(text: str) -> list[str]:
    """Split on terminator runs, returning trimmed non-empty sentences."""
    return [s.strip() for s in _SENTENCE_TERMINATORS.split(text) if s.strip()]


def pack_paragraphs(sentences: list[str], limit: int = PARAGRAPH_SOFT_LIMIT) -> list[str]:
    """
    Greedily pack sentences into paragraphs of roughly `limit` characters.

    A new paragraph starts only when the current one already has content
    and adding the next sentence would exceed the limit. Sentences within
    a paragraph are joined by a space; each paragraph ends with one period.
    """
    paragraphs = []
    current_paragraph = ''

    for sentence in sentences:
        if len(current_paragraph) + len(sentence) > limit:
            if current_paragraph:
                paragraphs.append(current_paragraph.strip() + '.')
            current_paragraph = sentence
        else:
            current_paragraph += (' ' if current_paragraph else '') + sentence

    if current_paragraph:
        paragraphs.append(current_paragraph.strip() + '.')

    return paragraphs


def clean_summary_format(summary: str) -> str:
    """
    Strip list/bold markup and re-flow a summary into paragraphs.

    Args:
        summary: Raw generated summary.

    Returns:
        Paragraphs separated by a blank line.
    """
    cleaned = strip_markup(summary)
    return '\n\n'.join(pack_paragraphs(split_sentences(cleaned)))


class SummaryFormatter:
    """
    Formats generated summaries for persistence.

    Example:
        formatter = SummaryFormatter()
        text = formatter.format("**Key points:**\\n- First point. Second point.")
    """

    def __init__(self, paragraph_limit: int = PARAGRAPH_SOFT_LIMIT):
        self.paragraph_limit = paragraph_limit

    def format(self, raw_summary: str) -> str:
        cleaned = strip_markup(raw_summary)
        return '\n\n'.join(pack_paragraphs(split_sentences(cleaned), self.paragraph_limit))

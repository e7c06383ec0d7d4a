"""Split case text into overlapping chunks, preferring paragraph and sentence boundaries."""
from __future__ import annotations

import logging
from collections.abc import Iterator

from caselens.analysis.errors import ChunkingError
from caselens.analysis.schemas import Chunk, ProcessingOptions

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SENTENCE_END = ". "


def estimate_tokens(text: str) -> int:
    # rough ~4 chars/token
    return max(1, len(text) // 4)


def line_number_at(text: str, offset: int) -> int:
    """1-based line number of the character at offset."""
    return text.count("\n", 0, offset) + 1


def _break_point(window: str) -> int:
    """Cut position inside window: paragraph, then sentence end, if past the midpoint; else the full window."""
    half = len(window) / 2
    last_paragraph = window.rfind(PARAGRAPH_BREAK)
    if last_paragraph > half:
        return last_paragraph
    last_sentence = window.rfind(SENTENCE_END)
    if last_sentence > half:
        return last_sentence + 1
    return len(window)


def iter_chunks(text: str, options: ProcessingOptions) -> Iterator[Chunk]:
    """
    Yield chunks of at most options.max_chunk_size characters.
    Each chunk after the first starts overlap_size characters before the previous chunk's end,
    so chunks cover the text with no gap. Raises ChunkingError if the cursor cannot advance.
    """
    size = options.max_chunk_size
    overlap = options.overlap_size
    start = 0
    index = 0
    while start < len(text):
        window = text[start : start + size]
        if start + size < len(text):
            window = window[: _break_point(window)]
        chunk = Chunk(index=index, start=start, text=window)
        yield chunk
        if chunk.end >= len(text):
            return
        advance = len(window) - overlap
        if advance <= 0:
            raise ChunkingError(
                f"overlap_size ({overlap}) >= chunk length ({len(window)}) at offset {start}; "
                "chunking would not advance"
            )
        start += advance
        index += 1


def split_into_chunks(text: str, options: ProcessingOptions) -> list[Chunk]:
    """Eager, ordered list of iter_chunks(text, options)."""
    chunks = list(iter_chunks(text, options))
    logger.debug(
        "Split %d chars into %d chunks (max_chunk_size=%d, overlap_size=%d)",
        len(text),
        len(chunks),
        options.max_chunk_size,
        options.overlap_size,
    )
    return chunks

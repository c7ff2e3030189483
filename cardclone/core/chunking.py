"""Text chunking and keyword tagging for knowledge ingestion."""

import re
from collections import Counter
from typing import Any

from cardclone.core.keyword_search import tokenize

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+|[^.!?]+$")


def split_sentences(text: str) -> list[str]:
    """Split text into sentences ending in . ! or ?, keeping a trailing fragment."""
    return [s for s in _SENTENCE_RE.findall(text) if s.strip()]


def split_into_chunks(text: str, max_chars: int = 1000) -> list[str]:
    """
    Group sentences into chunks of at most ``max_chars`` characters.

    A chunk is closed before the sentence that would push it past the limit.
    A single sentence longer than the limit becomes its own chunk.

    Args:
        text: Document text
        max_chars: Maximum characters per chunk

    Returns:
        Stripped, non-empty chunk strings in document order

    Raises:
        ValueError: If max_chars is not positive
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars ({max_chars}) must be positive")

    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text):
        if current and len(current + sentence) > max_chars:
            chunks.append(current.strip())
            current = ""
        current += sentence

    if current.strip():
        chunks.append(current.strip())

    return chunks


def extract_keywords(text: str, limit: int = 10) -> list[str]:
    """Most frequent significant terms; ties keep first-seen order."""
    # Counter preserves insertion order and most_common() sorts stably
    return [word for word, _ in Counter(tokenize(text)).most_common(limit)]


def build_knowledge_chunks(
    text: str,
    max_chars: int = 1000,
    keywords_per_chunk: int = 10,
) -> list[dict[str, Any]]:
    """
    Chunk a document and tag every chunk with its keywords.

    Returns:
        List of dicts with:
            - chunk_index: int (0-based)
            - content: str
            - keywords: list[str]
    """
    return [
        {
            "chunk_index": index,
            "content": content,
            "keywords": extract_keywords(content, keywords_per_chunk),
        }
        for index, content in enumerate(split_into_chunks(text, max_chars))
    ]

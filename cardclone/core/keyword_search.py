"""Keyword retrieval over the knowledge snippet pool.

Queries are split into significant terms, candidate snippets are fetched with
an OR filter, and each candidate is scored:

  +2 per term found as a case-insensitive substring of the content
  +1 per term equal (case-insensitive) to one of the snippet's keyword tags

The top snippets are joined with blank lines into a single reference string.
Retrieval never raises: store failures are logged and yield an empty string.
"""

from __future__ import annotations

import asyncio
import re

from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import KnowledgeSnippet, ScoredSnippet
from cardclone.db.knowledge import list_snippets_matching

logger = get_logger(__name__)

STOP_WORDS = frozenset(
    {"이", "그", "저", "것", "수", "등", "및", "를", "이다", "입니다", "했다", "했습니다"}
)

_SPLIT_RE = re.compile(r"[\s,.]+")

SUBSTRING_WEIGHT = 2
TAG_WEIGHT = 1


def tokenize(text: str) -> list[str]:
    """Split text into significant terms, keeping order and duplicates."""
    return [
        word
        for word in _SPLIT_RE.split(text)
        if len(word) > 1 and word not in STOP_WORDS
    ]


def score_snippet(snippet: KnowledgeSnippet, keywords: list[str]) -> int:
    """Score one snippet against the query terms."""
    content = snippet.content.lower()
    tags = {tag.lower() for tag in snippet.keywords}

    score = 0
    for keyword in keywords:
        keyword_lower = keyword.lower()
        if keyword_lower in content:
            score += SUBSTRING_WEIGHT
        if keyword_lower in tags:
            score += TAG_WEIGHT
    return score


def rank_snippets(
    snippets: list[KnowledgeSnippet],
    keywords: list[str],
    top_k: int = 2,
) -> list[ScoredSnippet]:
    """Score snippets and return the best ``top_k``; ties keep input order."""
    scored = [ScoredSnippet(snippet=s, score=score_snippet(s, keywords)) for s in snippets]
    # sorted() is stable, so equal scores stay in retrieval order
    scored = sorted(scored, key=lambda item: item.score, reverse=True)
    return scored[:top_k]


def search_relevant_snippets_sync(question: str, top_k: int = 2) -> str:
    """
    Find the knowledge snippets most relevant to a question.

    Args:
        question: Free-text user question
        top_k: Number of snippets to keep

    Returns:
        Snippet contents joined by blank lines, or "" when nothing matches
        or retrieval fails
    """
    keywords = tokenize(question)
    if not keywords:
        return ""

    try:
        candidates = list_snippets_matching(keywords)
    except Exception:
        logger.exception("Knowledge snippet retrieval failed; continuing without snippets")
        return ""

    top = rank_snippets(candidates, keywords, top_k=top_k)
    if top:
        logger.debug(
            f"Selected {len(top)} of {len(candidates)} snippets",
            extra={"extra_data": {"scores": [item.score for item in top]}},
        )
    return "\n\n".join(item.snippet.content for item in top)


async def search_relevant_snippets(question: str, top_k: int = 2) -> str:
    """Async wrapper around search_relevant_snippets_sync using thread pool."""
    return await asyncio.to_thread(search_relevant_snippets_sync, question, top_k)

"""Database operations for knowledge snippets (``pdf_chunks``)."""

from typing import Any

from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import KnowledgeSnippet
from cardclone.db.records import parse_rows, quote_filter_value
from cardclone.db.supabase_client import get_supabase

logger = get_logger(__name__)


def build_keyword_filter(keywords: list[str]) -> str:
    """
    Build the OR filter matching snippets for any keyword.

    Each keyword contributes two conditions: a case-insensitive substring
    match on ``content`` and an array-contains match on ``keywords``.
    """
    conditions = []
    for word in keywords:
        conditions.append(f"content.ilike.{quote_filter_value(f'%{word}%')}")
        conditions.append(f"keywords.cs.{{{quote_filter_value(word)}}}")
    return ",".join(conditions)


def list_snippets_matching(keywords: list[str]) -> list[KnowledgeSnippet]:
    """
    List snippets whose content or keyword tags match any keyword.

    Args:
        keywords: Query tokens (already filtered)

    Returns:
        Matching snippets in store order

    Raises:
        Exception: If the database call fails
    """
    if not keywords:
        return []

    supabase = get_supabase()
    response = (
        supabase.table("pdf_chunks")
        .select("content, keywords")
        .or_(build_keyword_filter(keywords))
        .execute()
    )
    return parse_rows(KnowledgeSnippet, response.data, "pdf_chunks")


def insert_snippets(chunks: list[dict[str, Any]]) -> int:
    """
    Insert knowledge chunks.

    Args:
        chunks: Dicts with ``content`` and ``keywords``

    Returns:
        Number of rows inserted

    Raises:
        Exception: If the database call fails
    """
    if not chunks:
        return 0

    supabase = get_supabase()
    rows = [{"content": c["content"], "keywords": c["keywords"]} for c in chunks]

    try:
        response = supabase.table("pdf_chunks").insert(rows).execute()
    except Exception as e:
        logger.error(f"Failed to insert {len(rows)} knowledge chunks: {e}")
        raise

    inserted = len(response.data or [])
    logger.info(f"Inserted {inserted} knowledge chunks", extra={"extra_data": {"count": inserted}})
    return inserted

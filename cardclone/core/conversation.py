"""Chat pipeline: one user message in, one grounded reply out.

Stages per request:
    received → resolving + retrieving (concurrent) → assembling
    → generating → persisting → responded

Any stage may end in ``failed``. Person resolution, snippet retrieval and the
owner's projects and experiences degrade to "nothing found"; the primary
owner's profile and the generation call are mandatory. A failed history
write is logged and the reply is still returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from cardclone.context.prompt_builder import build_system_prompt
from cardclone.core.config import Settings, get_settings
from cardclone.core.entity_resolver import resolve_mentioned_person
from cardclone.core.keyword_search import search_relevant_snippets
from cardclone.core.llm import generate_chat_completion
from cardclone.core.logging import get_logger, log_with_context
from cardclone.core.schemas_chat import ChatMessage, Experience, OwnerProfile, Project
from cardclone.db.chat_history import append_turn
from cardclone.db.owners import get_owner, list_experiences, list_projects

logger = get_logger(__name__)


class ChatStage(str, Enum):
    """Pipeline stage, recorded on failures and in logs."""

    RECEIVED = "received"
    RESOLVING = "resolving"
    RETRIEVING = "retrieving"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    PERSISTING = "persisting"
    RESPONDED = "responded"
    FAILED = "failed"


class ChatPipelineError(Exception):
    """Unrecoverable chat failure; callers show only a generic message."""

    def __init__(self, message: str, stage: ChatStage):
        super().__init__(message)
        self.stage = stage


class InvalidChatRequestError(ChatPipelineError):
    """Request rejected before any retrieval or generation work."""


class OwnerNotFoundError(ChatPipelineError):
    """Primary owner profile missing or unreadable."""


class GenerationError(ChatPipelineError):
    """Generation provider failed, timed out or returned nothing."""


@dataclass
class OwnerContext:
    """Primary owner's profile and professional records."""

    owner: OwnerProfile
    projects: list[Project]
    experiences: list[Experience]


def last_user_message(messages: list[ChatMessage]) -> str:
    """Content of the most recent user-authored message, or ""."""
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""


async def load_owner_context(owner_id: str) -> OwnerContext:
    """
    Fetch the primary owner's profile, projects and experiences concurrently.

    The profile is mandatory. A failed projects or experiences read is logged
    and treated as an empty list.

    Raises:
        OwnerNotFoundError: If the profile read fails or the profile is absent
    """
    owner, projects, experiences = await asyncio.gather(
        asyncio.to_thread(get_owner, owner_id),
        asyncio.to_thread(list_projects, owner_id),
        asyncio.to_thread(list_experiences, owner_id),
        return_exceptions=True,
    )

    if isinstance(owner, BaseException):
        raise OwnerNotFoundError(
            f"Owner profile fetch failed: {owner}", ChatStage.RETRIEVING
        ) from owner
    if owner is None:
        raise OwnerNotFoundError(f"Owner not found: {owner_id}", ChatStage.RETRIEVING)

    if isinstance(projects, BaseException):
        log_with_context(
            logger, logging.WARNING, f"Projects fetch failed; continuing without them: {projects!r}",
            owner_id=owner_id, stage=ChatStage.RETRIEVING.value,
        )
        projects = []
    if isinstance(experiences, BaseException):
        log_with_context(
            logger, logging.WARNING, f"Experiences fetch failed; continuing without them: {experiences!r}",
            owner_id=owner_id, stage=ChatStage.RETRIEVING.value,
        )
        experiences = []

    return OwnerContext(owner=owner, projects=projects, experiences=experiences)


async def _persist_turn(owner_id: str, role: str, content: str) -> None:
    try:
        await asyncio.to_thread(append_turn, owner_id, role, content)
    except Exception as e:
        log_with_context(
            logger, logging.ERROR, f"Failed to store {role} turn; reply is still returned: {e!r}",
            owner_id=owner_id, stage=ChatStage.PERSISTING.value,
        )


async def generate_reply(
    messages: list[ChatMessage],
    owner_id: str,
    settings: Settings | None = None,
) -> str:
    """
    Run the chat pipeline for one request.

    Args:
        messages: Prior turns plus the new user message, oldest first
        owner_id: Primary subject of the conversation
        settings: Settings override (defaults to get_settings())

    Returns:
        Generated reply text

    Raises:
        InvalidChatRequestError: If ``messages`` is empty
        OwnerNotFoundError: If the primary profile cannot be loaded
        GenerationError: If the provider call fails
    """
    settings = settings or get_settings()

    if not messages:
        raise InvalidChatRequestError("No messages provided", ChatStage.RECEIVED)

    query = last_user_message(messages)
    log_with_context(
        logger, logging.INFO, "Chat request received",
        owner_id=owner_id, stage=ChatStage.RECEIVED.value, turns=len(messages),
    )

    log_with_context(
        logger, logging.DEBUG, "Resolving mention and retrieving owner context",
        owner_id=owner_id, stage=ChatStage.RESOLVING.value,
    )
    # Independent reads: only the owner context may fail the request
    mentioned, owner_context, snippets = await asyncio.gather(
        resolve_mentioned_person(query, owner_id, settings.COMPANY_REPRESENTATIVE),
        load_owner_context(owner_id),
        search_relevant_snippets(query, settings.RETRIEVAL_TOP_K),
        return_exceptions=True,
    )
    if isinstance(owner_context, BaseException):
        log_with_context(
            logger, logging.ERROR, f"Chat failed: {owner_context}",
            owner_id=owner_id, stage=ChatStage.FAILED.value,
        )
        raise owner_context
    if isinstance(mentioned, BaseException):
        logger.warning(f"Person resolution raised unexpectedly: {mentioned}")
        mentioned = None
    if isinstance(snippets, BaseException):
        logger.warning(f"Snippet retrieval raised unexpectedly: {snippets}")
        snippets = ""

    system_prompt = build_system_prompt(
        owner_context.owner,
        owner_context.experiences,
        owner_context.projects,
        persona_name=settings.PERSONA_NAME,
        representative=settings.COMPANY_REPRESENTATIVE,
        snippets=snippets,
        mentioned=mentioned,
        timezone=settings.DISPLAY_TIMEZONE,
    )
    log_with_context(
        logger, logging.DEBUG, "System prompt assembled",
        owner_id=owner_id, stage=ChatStage.ASSEMBLING.value,
        prompt_chars=len(system_prompt), mentioned=bool(mentioned), snippets=bool(snippets),
    )

    payload = [{"role": "system", "content": system_prompt}]
    payload.extend({"role": m.role, "content": m.content} for m in messages)

    try:
        reply = await asyncio.wait_for(
            generate_chat_completion(payload, model=settings.CHAT_MODEL),
            timeout=settings.CHAT_TIMEOUT_SECONDS,
        )
    except Exception as e:
        log_with_context(
            logger, logging.ERROR, f"Generation failed: {e!r}",
            owner_id=owner_id, stage=ChatStage.FAILED.value,
        )
        raise GenerationError("Generation failed", ChatStage.GENERATING) from e

    if query:
        await _persist_turn(owner_id, "user", query)
    if settings.PERSIST_ASSISTANT_TURNS:
        await _persist_turn(owner_id, "assistant", reply)

    log_with_context(
        logger, logging.INFO, "Chat reply generated",
        owner_id=owner_id, stage=ChatStage.RESPONDED.value, reply_chars=len(reply),
    )
    return reply

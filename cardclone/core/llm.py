"""OpenAI client utilities for chat generation."""

from typing import Any

from openai import AsyncOpenAI

from cardclone.core.config import get_settings
from cardclone.core.logging import get_logger

logger = get_logger(__name__)


def get_async_client(timeout: float | None = None) -> AsyncOpenAI:
    """
    Get an OpenAI async client.

    Args:
        timeout: Request timeout in seconds (defaults to CHAT_TIMEOUT_SECONDS)

    Returns:
        AsyncOpenAI instance with retries disabled
    """
    settings = get_settings()
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        timeout=timeout if timeout is not None else settings.CHAT_TIMEOUT_SECONDS,
        max_retries=0,
    )


async def generate_chat_completion(
    messages: list[dict[str, Any]],
    model: str | None = None,
) -> str:
    """
    Generate one assistant reply for a role-tagged message list.

    Args:
        messages: [{"role": ..., "content": ...}, ...] including the system prompt
        model: Model name override (defaults to CHAT_MODEL)

    Returns:
        Assistant reply text

    Raises:
        ValueError: If the provider returns no text
        openai.OpenAIError: If the provider call fails
    """
    settings = get_settings()
    model_name = model or settings.CHAT_MODEL
    client = get_async_client()

    response = await client.chat.completions.create(model=model_name, messages=messages)

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise ValueError(f"Empty completion from {model_name}")

    logger.info(
        f"Generated reply with {model_name}",
        extra={"extra_data": {"model": model_name, "chars": len(content)}},
    )
    return content

"""Owner clone chat API endpoints."""

import asyncio

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError

from cardclone.core.config import get_settings
from cardclone.core.conversation import (
    ChatPipelineError,
    InvalidChatRequestError,
    generate_reply,
)
from cardclone.core.logging import get_logger
from cardclone.core.schemas_chat import ChatRequest, ChatResponse, ConversationTurn, ErrorResponse
from cardclone.db.chat_history import list_turns

logger = get_logger(__name__)

router = APIRouter()

GENERIC_CHAT_ERROR = "An error occurred"


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_with_owner(request: ChatRequest) -> ChatResponse:
    """
    Reply to the latest user message as the site owner's clone.

    Args:
        request: Prior turns plus the new user message

    Returns:
        ChatResponse with the generated reply

    Raises:
        HTTPException 400: If the request carries no usable messages
        HTTPException 500: On configuration, owner lookup or generation failure
    """
    try:
        settings = get_settings()
    except ValidationError:
        logger.exception("Chat configuration incomplete")
        raise HTTPException(status_code=500, detail=GENERIC_CHAT_ERROR)

    try:
        reply = await generate_reply(request.messages, settings.OWNER_ID, settings)
    except InvalidChatRequestError as e:
        raise HTTPException(status_code=400, detail="Invalid request") from e
    except ChatPipelineError as e:
        logger.error(f"Chat failed at stage {e.stage.value}: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_CHAT_ERROR) from e
    except Exception as e:
        logger.exception("Unexpected error in chat route")
        raise HTTPException(status_code=500, detail=GENERIC_CHAT_ERROR) from e

    return ChatResponse(response=reply)


@router.get("/chat", response_model=list[ConversationTurn])
async def get_chat_history() -> list[ConversationTurn]:
    """
    List stored turns for the configured owner, oldest first.

    Raises:
        HTTPException 500: If configuration or the database read fails
    """
    try:
        settings = get_settings()
        return await asyncio.to_thread(list_turns, settings.OWNER_ID)
    except Exception as e:
        logger.exception("Failed to fetch chat history")
        raise HTTPException(status_code=500, detail="Failed to fetch messages") from e

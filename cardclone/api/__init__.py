"""API router for the site's backend endpoints."""

from fastapi import APIRouter

from cardclone.api import chat, documents, speech, translate

router = APIRouter()

# Owner clone chat and history
router.include_router(chat.router, tags=["chat"])

# Knowledge ingestion for contextual Q&A
router.include_router(documents.router, tags=["documents"])

# Voice input/output
router.include_router(speech.router, tags=["speech"])

# Multilingual content
router.include_router(translate.router, tags=["translate"])

"""Translation endpoint for multilingual site content."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from cardclone.core.config import get_settings
from cardclone.core.logging import get_logger
from cardclone.services.deepl_service import (
    SOURCE_LANGUAGE,
    DeepLService,
    TranslationError,
    UnsupportedLanguageError,
)

logger = get_logger(__name__)

router = APIRouter()


class TranslateRequest(BaseModel):
    """Text and the visitor's language code."""

    text: str
    targetLanguage: str = Field(..., min_length=2)  # noqa: N815


class TranslateResponse(BaseModel):
    """Translated text."""

    translatedText: str  # noqa: N815


@router.post("/translate", response_model=TranslateResponse)
async def translate_text(request: TranslateRequest) -> TranslateResponse:
    """
    Translate Korean site text into en, ja or zh; ko is returned unchanged.

    Raises:
        HTTPException 400: For unsupported languages
        HTTPException 500: If translation is unavailable or fails
    """
    if request.targetLanguage == SOURCE_LANGUAGE:
        return TranslateResponse(translatedText=request.text)

    try:
        settings = get_settings()
    except Exception as e:
        logger.exception("Translation configuration incomplete")
        raise HTTPException(status_code=500, detail="Translation failed") from e

    if not settings.DEEPL_API_KEY:
        logger.error("Translation API key is not configured")
        raise HTTPException(status_code=500, detail="Translation failed")

    service = DeepLService(settings.DEEPL_API_KEY, settings.DEEPL_API_URL)
    try:
        translated = await service.translate(request.text, request.targetLanguage)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except TranslationError as e:
        raise HTTPException(status_code=500, detail="Translation failed") from e

    return TranslateResponse(translatedText=translated)

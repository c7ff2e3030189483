"""Speech-to-text and text-to-speech endpoints."""

from typing import Any

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from cardclone.core.config import get_settings
from cardclone.core.logging import get_logger
from cardclone.services.elevenlabs_service import ElevenLabsService, TextToSpeechError
from cardclone.services.transcription_service import TranscriptionError, transcribe_audio

logger = get_logger(__name__)

router = APIRouter()


class TranscriptionResponse(BaseModel):
    """Transcribed speech."""

    text: str


class SpeechRequest(BaseModel):
    """Text to synthesize."""

    text: str = Field(..., min_length=1)
    voice_settings: dict[str, Any] | None = None


@router.post("/stt", response_model=TranscriptionResponse)
async def speech_to_text(
    audio: UploadFile = File(...),  # noqa: B008
) -> TranscriptionResponse:
    """
    Transcribe recorded Korean speech.

    Raises:
        HTTPException: 400 for empty audio, 413 over the size limit,
            500 if transcription fails
    """
    try:
        settings = get_settings()
    except Exception as e:
        logger.exception("Speech-to-text configuration incomplete")
        raise HTTPException(status_code=500, detail="STT 변환 중 오류가 발생했습니다.") from e

    audio_bytes = await audio.read()
    if not audio_bytes:
        raise HTTPException(status_code=400, detail="오디오 파일이 없습니다.")
    if len(audio_bytes) > settings.MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="파일 크기는 25MB를 초과할 수 없습니다.")

    try:
        text = await transcribe_audio(audio.filename or "audio.webm", audio_bytes, audio.content_type)
    except TranscriptionError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e

    return TranscriptionResponse(text=text)


@router.post("/tts")
async def text_to_speech(request: SpeechRequest) -> Response:
    """
    Synthesize speech in the owner's voice.

    Returns:
        audio/mpeg response

    Raises:
        HTTPException 500: If TTS is not configured or synthesis fails
    """
    try:
        settings = get_settings()
    except Exception as e:
        logger.exception("Text-to-speech configuration incomplete")
        raise HTTPException(status_code=500, detail="TTS 변환 중 오류가 발생했습니다.") from e

    if not settings.ELEVENLABS_API_KEY or not settings.ELEVENLABS_VOICE_ID:
        logger.error("Text-to-speech credentials are not configured")
        raise HTTPException(status_code=500, detail="TTS 변환 중 오류가 발생했습니다.")

    service = ElevenLabsService(settings.ELEVENLABS_API_KEY, settings.ELEVENLABS_VOICE_ID)
    try:
        audio = await service.synthesize(request.text, request.voice_settings)
    except TextToSpeechError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        logger.exception("Text-to-speech request failed")
        raise HTTPException(status_code=500, detail="TTS 변환 중 오류가 발생했습니다.") from e

    return Response(
        content=audio,
        media_type="audio/mpeg",
        headers={"Cache-Control": "no-cache"},
    )

"""Speech-to-text via OpenAI Whisper."""

from openai import AsyncOpenAI

from cardclone.core.config import get_settings
from cardclone.core.logging import get_logger

logger = get_logger(__name__)

TRANSCRIPTION_PROMPT = (
    "이것은 AI 챗봇과의 대화입니다. 한국어로 명확하게 변환해주세요. "
    "문장을 자연스럽게 완성하고 맥락을 고려하여 변환합니다."
)


class TranscriptionError(Exception):
    """Transcription provider failure."""


async def transcribe_audio(
    filename: str,
    audio_bytes: bytes,
    content_type: str | None = None,
) -> str:
    """
    Transcribe Korean speech to text.

    Args:
        filename: Original filename (the provider infers the format from it)
        audio_bytes: Raw audio
        content_type: MIME type of the audio

    Returns:
        Transcript text

    Raises:
        TranscriptionError: If the provider call fails
    """
    settings = get_settings()
    client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)

    try:
        transcript = await client.audio.transcriptions.create(
            file=(filename, audio_bytes, content_type or "application/octet-stream"),
            model=settings.STT_MODEL,
            language="ko",
            response_format="text",
            temperature=0.3,
            prompt=TRANSCRIPTION_PROMPT,
        )
    except Exception as e:
        logger.error(f"Transcription failed: {e}")
        raise TranscriptionError("STT 변환 중 오류가 발생했습니다.") from e

    # response_format="text" yields a plain string
    text = transcript if isinstance(transcript, str) else getattr(transcript, "text", "")
    logger.info(f"Transcribed {len(audio_bytes)} bytes of audio", extra={"extra_data": {"chars": len(text)}})
    return text.strip()

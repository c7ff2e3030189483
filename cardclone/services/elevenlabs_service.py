"""ElevenLabs text-to-speech service.

Uses httpx for async HTTP requests.
"""

from __future__ import annotations

from typing import Any

import httpx

from cardclone.core.logging import get_logger

logger = get_logger(__name__)

ELEVENLABS_API = "https://api.elevenlabs.io/v1"
TTS_MODEL = "eleven_multilingual_v2"
DEFAULT_VOICE_SETTINGS = {"stability": 0.3, "similarity_boost": 0.8}

_STATUS_MESSAGES = {
    401: "인증 실패: API 키가 유효하지 않습니다.",
    422: "잘못된 요청: 텍스트가 너무 길거나 형식이 잘못되었습니다.",
    429: "요청 한도 초과: API 사용량을 확인해주세요.",
}


class TextToSpeechError(Exception):
    """Text-to-speech failure with a user-presentable message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ElevenLabsService:
    """Synthesizes speech with a single configured voice."""

    def __init__(self, api_key: str, voice_id: str, timeout: float = 30.0):
        self.voice_id = voice_id
        self.timeout = timeout
        self._headers = {
            "Accept": "audio/mpeg",
            "xi-api-key": api_key,
            "Content-Type": "application/json",
        }

    async def synthesize(self, text: str, voice_settings: dict[str, Any] | None = None) -> bytes:
        """Return MP3 audio for ``text``."""
        logger.info(
            "TTS request",
            extra={"extra_data": {"text_length": len(text), "model": TTS_MODEL}},
        )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{ELEVENLABS_API}/text-to-speech/{self.voice_id}",
                headers=self._headers,
                json={
                    "text": text,
                    "model_id": TTS_MODEL,
                    "voice_settings": voice_settings or DEFAULT_VOICE_SETTINGS,
                },
            )

        if resp.status_code != 200:
            logger.error(f"TTS request failed: {resp.status_code} {resp.text[:500]}")
            message = _STATUS_MESSAGES.get(
                resp.status_code, f"TTS 변환 실패: {resp.status_code} {resp.reason_phrase}"
            )
            raise TextToSpeechError(message, status_code=resp.status_code)

        audio = resp.content
        if not audio:
            raise TextToSpeechError("생성된 오디오가 비어있습니다.")

        logger.info(f"TTS audio received: {len(audio)} bytes")
        return audio

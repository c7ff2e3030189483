"""DeepL translation service."""

from __future__ import annotations

import httpx

from cardclone.core.logging import get_logger

logger = get_logger(__name__)

SOURCE_LANGUAGE = "ko"

# Site language code -> DeepL target_lang
LANGUAGE_MAP = {
    "en": "EN-US",
    "ja": "JA",
    "zh": "ZH",
    "ko": "KO",
}


class TranslationError(Exception):
    """Translation provider failure."""


class UnsupportedLanguageError(ValueError):
    """Target language has no DeepL mapping."""


class DeepLService:
    """Translates site content from Korean into the visitor's language."""

    def __init__(self, api_key: str, api_url: str, timeout: float = 15.0):
        self.api_url = api_url
        self.timeout = timeout
        self._headers = {
            "Authorization": f"DeepL-Auth-Key {api_key}",
            "Content-Type": "application/json",
        }

    async def translate(self, text: str, target_language: str) -> str:
        """
        Translate ``text`` into ``target_language`` (site code: en, ja, zh, ko).

        Raises:
            UnsupportedLanguageError: If the language is not mapped
            TranslationError: If the provider call fails
        """
        if target_language == SOURCE_LANGUAGE:
            return text

        target = LANGUAGE_MAP.get(target_language)
        if not target:
            raise UnsupportedLanguageError(f"Unsupported language: {target_language}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    self.api_url,
                    headers=self._headers,
                    json={
                        "text": [text],
                        "target_lang": target,
                        "formality": "prefer_more",
                        "preserve_formatting": True,
                    },
                )
                resp.raise_for_status()
                return resp.json()["translations"][0]["text"]
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            logger.error(f"Translation to {target} failed: {e}")
            raise TranslationError("Translation failed") from e

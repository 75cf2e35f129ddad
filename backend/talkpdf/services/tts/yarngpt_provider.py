"""
YarnGPT Speech Provider.

Nigerian-accented voices for English, Yoruba, Hausa, Igbo and Pidgin.
Requests are limited to 2000 characters, so the engine sends the script
in sentence-aligned chunks and concatenates the returned MP3 segments.
"""
from typing import Optional

import httpx

from ...core.voices import YARNGPT_VOICES, VoiceTable
from ...core.logging_config import get_logger
from .base import SpeechProvider, SynthesisResult

logger = get_logger(__name__)

YARNGPT_TTS_URL = "https://yarngpt.ai/api/v1/tts"

_AUDIO_CONTENT_MARKERS = ("audio", "mpeg", "mp3", "octet-stream")


class YarnGPTProvider(SpeechProvider):
    name = "yarngpt"
    audio_format = "mp3"
    content_type = "audio/mpeg"
    chunk_size = 2000
    max_text_length = 2000

    def __init__(
        self,
        api_key: Optional[str],
        voices: VoiceTable = YARNGPT_VOICES,
        http_client: Optional[httpx.AsyncClient] = None,
        **kwargs
    ):
        super().__init__(api_key, voices, http_client=http_client, **kwargs)

    async def _synthesize(self, text: str, language: str) -> SynthesisResult:
        voice = self.voice_for(language)
        response = await self._post(
            YARNGPT_TTS_URL,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json={"text": text, "voice": voice, "response_format": "mp3"},
        )

        if not response.is_success:
            logger.warning(f"YarnGPT request failed: {response.status_code} {response.text[:200]}")
            return SynthesisResult(error=str(response.status_code))

        content_type = response.headers.get("content-type", "").lower()
        if not any(marker in content_type for marker in _AUDIO_CONTENT_MARKERS):
            logger.warning(f"YarnGPT returned unexpected content-type '{content_type}'")
            return SynthesisResult(error=f"unexpected content-type {content_type or 'none'}")

        return SynthesisResult(audio=response.content)

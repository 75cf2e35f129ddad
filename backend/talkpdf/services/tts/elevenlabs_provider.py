"""
ElevenLabs Speech Provider.

Last in the default order. Its voices do not cover the Nigerian
languages, so it is only offered for English scripts.
"""
from typing import Optional

import httpx

from ...core.voices import ELEVENLABS_VOICES, LOCAL_LANGUAGES, VoiceTable
from ...core.logging_config import get_logger
from .base import SpeechProvider, SynthesisResult

logger = get_logger(__name__)

ELEVENLABS_TTS_URL = "https://api.elevenlabs.io/v1/text-to-speech/{voice_id}"
ELEVENLABS_MODEL = "eleven_multilingual_v2"


class ElevenLabsProvider(SpeechProvider):
    name = "elevenlabs"
    audio_format = "mp3"
    content_type = "audio/mpeg"
    max_text_length = 5000
    unsupported_languages = LOCAL_LANGUAGES

    def __init__(
        self,
        api_key: Optional[str],
        voices: VoiceTable = ELEVENLABS_VOICES,
        http_client: Optional[httpx.AsyncClient] = None,
        **kwargs
    ):
        super().__init__(api_key, voices, http_client=http_client, **kwargs)

    async def _synthesize(self, text: str, language: str) -> SynthesisResult:
        response = await self._post(
            ELEVENLABS_TTS_URL.format(voice_id=self.voice_for(language)),
            headers={"xi-api-key": self.api_key or "", "Content-Type": "application/json"},
            params={"output_format": "mp3_44100_128"},
            json={
                "text": text[:self.max_text_length],
                "model_id": ELEVENLABS_MODEL,
                "voice_settings": {"stability": 0.5, "similarity_boost": 0.75},
            },
        )

        if not response.is_success:
            logger.warning(f"ElevenLabs request failed: {response.status_code}")
            return SynthesisResult(error=str(response.status_code))

        return SynthesisResult(audio=response.content)

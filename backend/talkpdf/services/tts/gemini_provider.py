"""
Gemini Speech Provider.

The generateContent TTS endpoint returns base64 16-bit mono PCM at 24 kHz
with no container; the samples are wrapped in a WAV header before being
handed back.
"""
import base64
import binascii
from typing import Optional

import httpx

from ...core.voices import GEMINI_VOICES, VoiceTable
from ...core.logging_config import get_logger
from .audio_utils import add_wav_header
from .base import SpeechProvider, SynthesisResult

logger = get_logger(__name__)

GEMINI_TTS_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-flash-preview-tts:generateContent"
)
GEMINI_SAMPLE_RATE = 24000


class GeminiTTSProvider(SpeechProvider):
    name = "gemini"
    audio_format = "wav"
    content_type = "audio/wav"
    max_text_length = 5000

    def __init__(
        self,
        api_key: Optional[str],
        voices: VoiceTable = GEMINI_VOICES,
        http_client: Optional[httpx.AsyncClient] = None,
        **kwargs
    ):
        super().__init__(api_key, voices, http_client=http_client, **kwargs)

    async def _synthesize(self, text: str, language: str) -> SynthesisResult:
        voice = self.voice_for(language)
        response = await self._post(
            GEMINI_TTS_URL,
            headers={"x-goog-api-key": self.api_key or "", "Content-Type": "application/json"},
            json={
                "contents": [{"parts": [{"text": text[:self.max_text_length]}]}],
                "generationConfig": {
                    "responseModalities": ["AUDIO"],
                    "speechConfig": {
                        "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}}
                    },
                },
            },
        )

        if not response.is_success:
            logger.warning(f"Gemini TTS request failed: {response.status_code} {response.text[:300]}")
            return SynthesisResult(error=str(response.status_code))

        try:
            encoded = response.json()["candidates"][0]["content"]["parts"][0]["inlineData"]["data"]
            pcm = base64.b64decode(encoded)
        except (ValueError, KeyError, IndexError, TypeError, binascii.Error) as e:
            logger.warning(f"Gemini TTS response had no audio data: {type(e).__name__}")
            return SynthesisResult(error="no audio data")

        return SynthesisResult(audio=add_wav_header(pcm, sample_rate=GEMINI_SAMPLE_RATE))

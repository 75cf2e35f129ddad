"""
Base Speech Provider Interface.

Every speech-synthesis service is wrapped in a SpeechProvider adapter with
one capability: synthesize(text, language) -> SynthesisResult. The
fallback engine iterates an ordered list of adapters; adding, removing or
reordering providers is a configuration change.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

import httpx

from ...core.config import TTS_TIMEOUT_SECONDS
from ...core.voices import VoiceTable
from ...core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SynthesisResult:
    """Audio payload or failure reason from one provider request."""
    audio: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.audio is not None and self.error is None


class SpeechProvider(ABC):
    """
    Abstract base class for speech-synthesis providers.

    Class attributes describe capabilities the engine relies on:
        name: Identifier recorded in tts metadata
        audio_format / content_type: Container produced
        max_text_length: Per-request text cap for non-chunking providers
        chunk_size: Per-request text cap for chunking providers (None = no chunking)
        unsupported_languages: Language codes the provider has no voices for
    """

    name: str = "base"
    audio_format: str = "mp3"
    content_type: str = "audio/mpeg"
    max_text_length: int = 5000
    chunk_size: Optional[int] = None
    unsupported_languages: FrozenSet[str] = frozenset()

    def __init__(
        self,
        api_key: Optional[str],
        voices: VoiceTable,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = TTS_TIMEOUT_SECONDS
    ):
        """
        Args:
            api_key: Provider API key
            voices: Language -> voice table
            http_client: Shared client (tests inject one backed by MockTransport)
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.voices = voices
        self.timeout = timeout
        self._http_client = http_client

    @property
    def supports_chunking(self) -> bool:
        return self.chunk_size is not None

    def supports_language(self, language: str) -> bool:
        return language not in self.unsupported_languages

    def voice_for(self, language: str) -> Optional[str]:
        return self.voices.voice_for(language)

    async def _post(
        self,
        url: str,
        headers: Dict[str, str],
        json: Dict[str, Any],
        params: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, headers=headers, json=json, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, headers=headers, json=json, params=params)

    async def synthesize(self, text: str, language: str) -> SynthesisResult:
        """
        Synthesize one request's worth of text.

        Transport errors are reported as a failure reason, never raised.
        """
        try:
            return await self._synthesize(text, language)
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} transport error: {type(e).__name__}: {e}")
            return SynthesisResult(error=f"transport error: {type(e).__name__}")

    @abstractmethod
    async def _synthesize(self, text: str, language: str) -> SynthesisResult:
        pass

"""
TTS Fallback Engine.

Tries speech providers strictly one at a time in priority order and stops
at the first one whose audio is larger than min_audio_bytes. Every provider
that was attempted and failed is recorded as "<name> (<reason>)", including
when a later provider succeeds.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ...core.plans import PlanLimits
from ...core.logging_config import get_logger
from .audio_utils import concatenate_audio, split_into_chunks
from .base import SpeechProvider

logger = get_logger(__name__)

# Payloads at or below this size are treated as empty/corrupt
MIN_AUDIO_BYTES = 1024

PAYLOAD_TOO_SMALL = "payload too small"


@dataclass
class TTSResult:
    audio: Optional[bytes] = None
    provider: str = "none"
    voice: Optional[str] = None
    audio_format: Optional[str] = None
    content_type: Optional[str] = None
    chunks_generated: int = 0
    failed_providers: List[str] = field(default_factory=list)
    skipped_providers: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.audio is not None


class ProviderAttemptFailed(Exception):
    """One provider could not produce valid audio."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TTSFallbackEngine:
    """
    Waterfall over an ordered list of SpeechProvider adapters.
    """

    def __init__(self, providers: Sequence[SpeechProvider], min_audio_bytes: int = MIN_AUDIO_BYTES):
        self.providers = list(providers)
        self.min_audio_bytes = min_audio_bytes

    async def synthesize(self, text: str, language: str, plan: PlanLimits) -> TTSResult:
        """
        Produce narration audio for a normalized script.

        Args:
            text: Script (already truncated and whitespace-normalized)
            language: Language code of the script's intended voice
            plan: Owner's plan limits (chunk cap)

        Returns:
            TTSResult; provider == "none" and audio None when every provider failed
        """
        result = TTSResult()
        if not text.strip():
            logger.warning("Empty narration script, skipping speech synthesis")
            return result

        for provider in self.providers:
            if not provider.supports_language(language):
                logger.info(f"Skipping {provider.name}: no voices for '{language}'")
                result.skipped_providers.append(provider.name)
                continue

            logger.info(f"Trying {provider.name} for {len(text)} chars ({language})")
            try:
                audio, chunks = await self._attempt(provider, text, language, plan)
            except ProviderAttemptFailed as failure:
                logger.warning(f"{provider.name} failed: {failure.reason}")
                result.failed_providers.append(f"{provider.name} ({failure.reason})")
                continue
            except Exception as e:
                logger.error(f"{provider.name} raised unexpectedly: {e}", exc_info=True)
                result.failed_providers.append(f"{provider.name} (error)")
                continue

            result.audio = audio
            result.provider = provider.name
            result.voice = provider.voice_for(language)
            result.audio_format = provider.audio_format
            result.content_type = provider.content_type
            result.chunks_generated = chunks
            logger.info(f"✅ {provider.name} produced {len(audio)} bytes in {chunks} chunk(s)")
            return result

        logger.warning(f"All speech providers failed: {result.failed_providers or 'none available'}")
        return result

    async def _attempt(self, provider: SpeechProvider, text: str, language: str, plan: PlanLimits):
        if provider.supports_chunking:
            chunks = split_into_chunks(text, provider.chunk_size)[:max(1, plan.max_chunks)]
        else:
            chunks = [text[:provider.max_text_length]]

        buffers: List[bytes] = []
        for index, chunk in enumerate(chunks, start=1):
            outcome = await provider.synthesize(chunk, language)
            if outcome.error is not None or outcome.audio is None:
                raise ProviderAttemptFailed(outcome.error or "no audio")
            if len(outcome.audio) <= self.min_audio_bytes:
                raise ProviderAttemptFailed(PAYLOAD_TOO_SMALL)
            logger.debug(f"{provider.name} chunk {index}/{len(chunks)}: {len(outcome.audio)} bytes")
            buffers.append(outcome.audio)

        return concatenate_audio(buffers), len(buffers)

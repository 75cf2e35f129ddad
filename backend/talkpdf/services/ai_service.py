"""
AI Service - async facade over the configured text-understanding provider.

Provider SDK calls are blocking, so they run in the default executor.
Failures are logged and surfaced as None; each pipeline stage decides its
own fallback.
"""
import asyncio
from functools import partial
from typing import Optional

from .providers import AIProvider, AIProviderFactory
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class AIService:
    """
    AI service implementation.
    Handles document reading and text generation for the pipeline stages.
    """

    def __init__(self, provider: Optional[AIProvider] = None):
        self.provider = provider or AIProviderFactory.get_provider()
        logger.info(f"Initialized AIService with provider: {type(self.provider).__name__}")

    async def _call(self, label: str, fn) -> Optional[str]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, fn)
        except Exception as e:
            logger.error(f"AI Service Error ({label}): {type(e).__name__}: {e}", exc_info=True)
            return None

    async def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
        temperature: float
    ) -> Optional[str]:
        """Run a system + user exchange. Returns None on provider failure."""
        logger.debug(f"Generating text (input: {len(user_content)} chars, max_tokens: {max_tokens})")
        return await self._call(
            "text",
            partial(self.provider.generate_text, system_prompt, user_content, max_tokens, temperature)
        )

    async def read_document(
        self,
        system_prompt: str,
        instruction: str,
        file_bytes: bytes,
        file_name: str,
        mime_type: str,
        max_tokens: int,
        temperature: float
    ) -> Optional[str]:
        """Send a document to the provider. Returns None on provider failure."""
        logger.debug(f"Reading document {file_name} ({len(file_bytes)} bytes, {mime_type})")
        return await self._call(
            "document",
            partial(
                self.provider.read_document,
                system_prompt,
                instruction,
                file_bytes,
                file_name,
                mime_type,
                max_tokens,
                temperature
            )
        )

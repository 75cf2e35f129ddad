"""
Anthropic AI Provider.

Provides text understanding using Anthropic's Claude API directly.
PDFs are sent as base64 document blocks.
"""
import base64
from typing import Optional

import anthropic

from ...core.config import ANTHROPIC_API_KEY, ANTHROPIC_MODEL
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class AnthropicProvider(AIProvider):
    """
    AI Provider using Anthropic Claude API directly.
    """

    name = "anthropic"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize Anthropic provider with API key."""
        self.api_key = api_key or ANTHROPIC_API_KEY
        self.model = model or ANTHROPIC_MODEL
        if self.api_key:
            self.client = anthropic.Anthropic(api_key=self.api_key)
        else:
            self.client = None

    def _create(self, system_prompt: str, content, max_tokens: int, temperature: float) -> str:
        if not self.client:
            raise ValueError("Anthropic API key not configured")

        message = self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": content}]
        )
        return "".join(block.text for block in message.content if getattr(block, "type", "") == "text")

    def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        try:
            return self._create(system_prompt, user_content, max_tokens, temperature)
        except Exception as e:
            logger.error(f"Anthropic API Error (text): {e}")
            raise

    def read_document(
        self,
        system_prompt: str,
        instruction: str,
        file_bytes: bytes,
        file_name: str,
        mime_type: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        if mime_type != "application/pdf":
            raise ValueError(f"Anthropic document input does not accept {mime_type} ({file_name})")

        content = [
            {
                "type": "document",
                "source": {
                    "type": "base64",
                    "media_type": mime_type,
                    "data": base64.b64encode(file_bytes).decode("ascii")
                }
            },
            {"type": "text", "text": instruction}
        ]
        try:
            return self._create(system_prompt, content, max_tokens, temperature)
        except Exception as e:
            logger.error(f"Anthropic API Error (document): {e}")
            raise

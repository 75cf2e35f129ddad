"""
OpenRouter AI Provider.

Talks to any OpenAI-compatible chat completions gateway (OpenRouter by
default). Documents are attached as a base64 data URL file part, which
gateways route to multimodal models such as Gemini.
"""
import base64
from typing import Optional

from openai import OpenAI

from ...core.config import OPENROUTER_API_KEY, AI_GATEWAY_BASE_URL, AI_TEXT_MODEL
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class OpenRouterProvider(AIProvider):
    """
    AI Provider using an OpenAI-compatible gateway.
    """

    name = "openrouter"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None
    ):
        """Initialize provider with API key, gateway URL and model."""
        self.api_key = api_key or OPENROUTER_API_KEY
        self.base_url = base_url or AI_GATEWAY_BASE_URL
        self.model = model or AI_TEXT_MODEL
        if self.api_key:
            self.client = OpenAI(
                base_url=self.base_url,
                api_key=self.api_key
            )
        else:
            self.client = None

    def _complete(self, messages: list, max_tokens: int, temperature: float) -> str:
        if not self.client:
            raise ValueError("OpenRouter API key not configured")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=temperature
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        try:
            return self._complete(
                [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                max_tokens,
                temperature
            )
        except Exception as e:
            logger.error(f"OpenRouter API Error (text): {e}")
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
        encoded = base64.b64encode(file_bytes).decode("ascii")
        try:
            return self._complete(
                [
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {
                                "type": "file",
                                "file": {
                                    "filename": file_name,
                                    "file_data": f"data:{mime_type};base64,{encoded}"
                                }
                            }
                        ]
                    }
                ],
                max_tokens,
                temperature
            )
        except Exception as e:
            logger.error(f"OpenRouter API Error (document): {e}")
            raise

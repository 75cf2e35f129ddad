"""
Mock AI Provider.

Provides deterministic responses for development and tests.
Does not make actual API calls.
"""
import json

from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class MockProvider(AIProvider):
    """
    Mock AI Provider for testing and fallback scenarios.

    Useful for:
    - Development and testing
    - Fallback when API keys are not configured
    - Offline development
    """

    name = "mock"

    def generate_text(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
        temperature: float
    ) -> str:
        if "study_prompts" in system_prompt:
            excerpt = " ".join(user_content.split()[:80])
            return json.dumps({
                "summary": f"This is a MOCK summary of the document. {excerpt}",
                "study_prompts": [
                    {"topic": "Main idea", "prompt": "What is the central argument of the document?"},
                    {"topic": "Key terms", "prompt": "Define the key terms introduced in the text."},
                    {"topic": "Application", "prompt": "How would you apply these ideas in practice?"}
                ]
            })
        # Translation and any other plain-text request echo the input
        return f"[MOCK TRANSLATION] {user_content}"

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
        return (
            f"MOCK extracted text for {file_name} ({len(file_bytes)} bytes). "
            "No AI provider is configured, so this placeholder stands in for the document content."
        )

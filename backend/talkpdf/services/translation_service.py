"""
Translation Stage - rewrites the narration script into the requested language.

Best-effort only: provider failure or implausibly short output leaves the
original text in place and reports applied=False.
"""
import math
from dataclasses import dataclass
from typing import Optional

from .ai_service import AIService
from ..core.plans import PlanLimits
from ..core.voices import DEFAULT_LANGUAGE, language_label
from ..core.logging_config import get_logger

logger = get_logger(__name__)

# Output at or below this length is treated as a failed translation
MIN_TRANSLATION_CHARS = 20
TRANSLATION_TEMPERATURE = 0.3

TRANSLATION_PROMPT = "Translate the following text to {label}. Output ONLY the translation, nothing else."


@dataclass
class TranslationResult:
    text: str
    applied: bool
    reason: Optional[str] = None


class TranslationService:
    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def translate(self, text: str, language: str, plan: PlanLimits) -> TranslationResult:
        """
        Translate the narration script.

        Args:
            text: Script in the default language
            language: Target language code
            plan: Owner's plan limits (caps input and output budget)

        Returns:
            TranslationResult; on failure text is the original input
        """
        if language == DEFAULT_LANGUAGE:
            return TranslationResult(text=text, applied=False, reason="not requested")

        label = language_label(language)
        source = text[:plan.max_tts_chars]
        logger.info(f"Translating {len(source)} chars to {label}")

        raw = await self.ai_service.generate_text(
            TRANSLATION_PROMPT.format(label=label),
            source,
            math.ceil(plan.max_tts_chars / 2),
            TRANSLATION_TEMPERATURE
        )
        if raw is None:
            logger.warning(f"Translation to {label} failed, narrating original text")
            return TranslationResult(text=text, applied=False, reason="provider error")

        translated = raw.strip()
        if len(translated) <= MIN_TRANSLATION_CHARS:
            logger.warning(
                f"Translation to {label} returned {len(translated)} chars, narrating original text"
            )
            return TranslationResult(text=text, applied=False, reason="output too short")

        return TranslationResult(text=translated, applied=True)

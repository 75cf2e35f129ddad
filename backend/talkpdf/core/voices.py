"""
Narration languages and per-provider voice tables.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

DEFAULT_LANGUAGE = "en"

LANGUAGE_LABELS: Dict[str, str] = {
    "en": "English",
    "yo": "Yoruba",
    "ha": "Hausa",
    "ig": "Igbo",
    "pcm": "Nigerian Pidgin",
}

SUPPORTED_LANGUAGES: FrozenSet[str] = frozenset(LANGUAGE_LABELS)

# Nigerian languages; some providers have no voices for these
LOCAL_LANGUAGES: FrozenSet[str] = frozenset({"yo", "ha", "ig", "pcm"})


def language_label(code: str) -> str:
    """Human-readable language name used in translation prompts."""
    return LANGUAGE_LABELS.get(code, LANGUAGE_LABELS[DEFAULT_LANGUAGE])


@dataclass(frozen=True)
class VoiceTable:
    """
    Maps language codes to a provider's voice identifiers.

    Attributes:
        provider: Provider name the table belongs to
        voices: language code -> provider voice id
        default_voice: Voice used when a language has no entry
    """
    provider: str
    voices: Dict[str, str] = field(default_factory=dict)
    default_voice: Optional[str] = None

    def voice_for(self, language: str) -> Optional[str]:
        return self.voices.get(language, self.default_voice)


YARNGPT_VOICES = VoiceTable(
    provider="yarngpt",
    voices={
        "yo": "Adaora",
        "ha": "Umar",
        "ig": "Chinenye",
        "en": "Femi",
        "pcm": "Tayo",
    },
    default_voice="Femi",
)

GEMINI_VOICES = VoiceTable(
    provider="gemini",
    voices={
        "en": "Charon",
        "yo": "Kore",
        "ha": "Kore",
        "ig": "Kore",
        "pcm": "Puck",
    },
    default_voice="Charon",
)

ELEVENLABS_VOICES = VoiceTable(
    provider="elevenlabs",
    voices={"en": "onwK4e9ZLuTAKqWW03F9"},
    default_voice="onwK4e9ZLuTAKqWW03F9",
)

"""
Speech synthesis: provider adapters, the fallback engine and audio helpers.
"""
from .base import SpeechProvider, SynthesisResult
from .engine import TTSFallbackEngine, TTSResult, MIN_AUDIO_BYTES
from .factory import SpeechProviderFactory
from .yarngpt_provider import YarnGPTProvider
from .gemini_provider import GeminiTTSProvider
from .elevenlabs_provider import ElevenLabsProvider

__all__ = [
    "SpeechProvider",
    "SynthesisResult",
    "TTSFallbackEngine",
    "TTSResult",
    "MIN_AUDIO_BYTES",
    "SpeechProviderFactory",
    "YarnGPTProvider",
    "GeminiTTSProvider",
    "ElevenLabsProvider",
]

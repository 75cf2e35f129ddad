"""
Speech Provider Factory.

Builds the ordered provider list from configuration. Providers without an
API key are left out of the waterfall.
"""
from typing import Dict, List, Optional, Sequence

import httpx

from ...core import config
from ...core.logging_config import get_logger
from .base import SpeechProvider
from .elevenlabs_provider import ElevenLabsProvider
from .gemini_provider import GeminiTTSProvider
from .yarngpt_provider import YarnGPTProvider

logger = get_logger(__name__)

PROVIDER_CLASSES = {
    "yarngpt": YarnGPTProvider,
    "gemini": GeminiTTSProvider,
    "elevenlabs": ElevenLabsProvider,
}


class SpeechProviderFactory:
    """Factory for the ordered speech-provider list."""

    @staticmethod
    def configured_keys() -> Dict[str, Optional[str]]:
        return {
            "yarngpt": config.YARNGPT_API_KEY,
            "gemini": config.GEMINI_API_KEY,
            "elevenlabs": config.ELEVENLABS_API_KEY,
        }

    @staticmethod
    def create_providers(
        order: Optional[Sequence[str]] = None,
        api_keys: Optional[Dict[str, Optional[str]]] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ) -> List[SpeechProvider]:
        """
        Build providers in priority order.

        Args:
            order: Provider names, highest priority first (defaults to TTS_PROVIDER_ORDER)
            api_keys: name -> API key (defaults to configured keys)
            http_client: Shared httpx client passed to every provider

        Returns:
            List of SpeechProvider instances
        """
        order = list(order or config.TTS_PROVIDER_ORDER)
        api_keys = api_keys if api_keys is not None else SpeechProviderFactory.configured_keys()

        providers: List[SpeechProvider] = []
        for name in order:
            provider_class = PROVIDER_CLASSES.get(name)
            if provider_class is None:
                logger.warning(f"⚠️  Unknown speech provider '{name}' in TTS_PROVIDER_ORDER, ignoring")
                continue
            api_key = api_keys.get(name)
            if not api_key:
                logger.info(f"  → {name}: API key not configured, not used")
                continue
            providers.append(provider_class(api_key, http_client=http_client))
            logger.info(f"  → {name}: enabled (priority {len(providers)})")

        if not providers:
            logger.warning("⚠️  No speech providers configured; documents will be ready without audio")
        return providers

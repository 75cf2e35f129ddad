"""
AI Provider Factory.

Manages provider selection and initialization based on configuration.
Uses the Factory pattern to provide plug-and-play AI provider support.
"""
from typing import Optional

from ...core import config
from ...core.logging_config import get_logger
from .base import AIProvider
from .openrouter_provider import OpenRouterProvider
from .anthropic_provider import AnthropicProvider
from .mock_provider import MockProvider

logger = get_logger(__name__)


class AIProviderFactory:
    """
    Factory for creating AI provider instances.

    Automatically selects the appropriate provider based on:
    1. AI_PROVIDER configuration
    2. Available API keys
    3. Fallback to MockProvider if no keys available
    """

    @staticmethod
    def get_provider(provider_type: Optional[str] = None) -> AIProvider:
        """
        Get the appropriate AI provider based on configuration.

        Args:
            provider_type: Override for AI_PROVIDER

        Returns:
            AIProvider instance (OpenRouterProvider, AnthropicProvider, or MockProvider)
        """
        provider_type = (provider_type or config.AI_PROVIDER).lower()

        if provider_type == "mock":
            logger.info("Using MockProvider (configured)")
            return MockProvider()

        if provider_type == "anthropic":
            preferred = [("anthropic", config.ANTHROPIC_API_KEY), ("openrouter", config.OPENROUTER_API_KEY)]
        elif provider_type == "openrouter":
            preferred = [("openrouter", config.OPENROUTER_API_KEY), ("anthropic", config.ANTHROPIC_API_KEY)]
        else:
            logger.warning(f"⚠️  Unknown provider '{provider_type}', checking available API keys...")
            preferred = [("openrouter", config.OPENROUTER_API_KEY), ("anthropic", config.ANTHROPIC_API_KEY)]

        for index, (name, api_key) in enumerate(preferred):
            if not api_key:
                logger.warning(f"⚠️  {name} API key not configured")
                continue
            if index > 0:
                logger.info(f"✓ Using {name} provider as fallback")
            else:
                logger.info(f"Using {name} provider")
            return OpenRouterProvider() if name == "openrouter" else AnthropicProvider()

        logger.warning("⚠️  No API keys configured, using MockProvider")
        return MockProvider()

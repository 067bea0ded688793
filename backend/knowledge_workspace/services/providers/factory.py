"""
AI Provider Factory.

Manages provider selection and initialization based on configuration.
Uses the Factory pattern to provide plug-and-play AI provider support.
"""
from typing import Optional

from ...core.config import (
    OPENAI_API_KEY,
    OPENROUTER_API_KEY,
    ANTHROPIC_API_KEY,
    AI_PROVIDER
)
from ...core.logging_config import get_logger
from .base import AIProvider
from .openai_provider import OpenAIProvider
from .openrouter_provider import OpenRouterProvider
from .anthropic_provider import AnthropicProvider

logger = get_logger(__name__)

_PROVIDERS = {
    "openai": (OpenAIProvider, lambda: OPENAI_API_KEY),
    "openrouter": (OpenRouterProvider, lambda: OPENROUTER_API_KEY),
    "anthropic": (AnthropicProvider, lambda: ANTHROPIC_API_KEY),
}


class AIProviderFactory:
    """
    Factory for creating AI provider instances.
    
    Selects the provider named by AI_PROVIDER when its key is set,
    otherwise the first other provider that has a key. Returns None when
    no provider can be built (or AI_PROVIDER is 'heuristic'), which the
    summarizer treats as "LLM not available".
    """
    
    @staticmethod
    def get_provider(provider_type: Optional[str] = None) -> Optional[AIProvider]:
        """
        Get the appropriate AI provider based on configuration.
        
        Args:
            provider_type: Override for AI_PROVIDER
        
        Returns:
            AIProvider instance, or None if no provider is configured
        """
        provider_type = (provider_type or AI_PROVIDER).lower()
        
        if provider_type == "heuristic":
            logger.info("AI provider disabled by configuration, using heuristic summaries")
            return None
        
        if provider_type in _PROVIDERS:
            provider_cls, key = _PROVIDERS[provider_type]
            if key():
                logger.info(f"Using {provider_cls.__name__}")
                return provider_cls()
            logger.warning(f"{provider_type} API key not configured, checking other providers...")
        else:
            logger.warning(f"Unknown provider '{provider_type}', checking available API keys...")
        
        for name, (provider_cls, key) in _PROVIDERS.items():
            if name != provider_type and key():
                logger.info(f"Using {provider_cls.__name__} as fallback")
                return provider_cls()
        
        logger.warning("No AI API keys configured")
        return None

"""
OpenRouter AI Provider.

Provides AI capabilities using OpenRouter API (supports multiple models)
through its OpenAI-compatible endpoint.
"""
from ...core.config import OPENROUTER_API_KEY, OPENROUTER_BASE_URL, OPENROUTER_MODEL
from .openai_provider import OpenAIProvider


class OpenRouterProvider(OpenAIProvider):
    """AI Provider using OpenRouter with the OpenAI client."""
    
    name = "openrouter"
    
    def __init__(self, api_key: str = None, model: str = None):
        super().__init__(
            api_key=api_key or OPENROUTER_API_KEY,
            model=model or OPENROUTER_MODEL,
            base_url=OPENROUTER_BASE_URL
        )

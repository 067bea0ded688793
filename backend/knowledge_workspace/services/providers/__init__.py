"""
AI Providers Module - Modular AI provider implementations.

This module provides a plug-and-play architecture for AI providers
using the Strategy pattern.

To add a new AI provider:
1. Create a new provider class inheriting from AIProvider
2. Implement complete_json()
3. Register it in AIProviderFactory
"""
from .base import AIProvider
from .factory import AIProviderFactory
from .openai_provider import OpenAIProvider
from .openrouter_provider import OpenRouterProvider
from .anthropic_provider import AnthropicProvider

__all__ = [
    "AIProvider",
    "AIProviderFactory",
    "OpenAIProvider",
    "OpenRouterProvider",
    "AnthropicProvider",
]

"""
Anthropic AI Provider.

Provides AI capabilities using Anthropic's Claude API directly.
"""
import anthropic
from ...core.config import ANTHROPIC_API_KEY, ANTHROPIC_MODEL, LLM_TIMEOUT_SECONDS
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class AnthropicProvider(AIProvider):
    """
    AI Provider using Anthropic Claude API directly.

    Claude has no JSON response mode, so the reply is prefilled with "{"
    and the opening brace is added back before returning.
    """
    
    name = "anthropic"
    
    def __init__(self, api_key: str = None, model: str = None):
        self.api_key = api_key or ANTHROPIC_API_KEY
        self.model = model or ANTHROPIC_MODEL
        if not self.api_key:
            raise ValueError("Anthropic API key not configured")
        self.client = anthropic.AsyncAnthropic(
            api_key=self.api_key,
            timeout=LLM_TIMEOUT_SECONDS,
            max_retries=1
        )
    
    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.5
    ) -> str:
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system_prompt,
                messages=[
                    {"role": "user", "content": user_prompt},
                    {"role": "assistant", "content": "{"}
                ]
            )
            return "{" + message.content[0].text
        except Exception as e:
            logger.error(f"Anthropic API Error: {e}")
            raise

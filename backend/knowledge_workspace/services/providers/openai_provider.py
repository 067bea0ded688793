"""
OpenAI AI Provider.

Provides chat completions through the official OpenAI API.
"""
from openai import AsyncOpenAI
from ...core.config import OPENAI_API_KEY, OPENAI_MODEL, LLM_TIMEOUT_SECONDS
from ...core.logging_config import get_logger
from .base import AIProvider

logger = get_logger(__name__)


class OpenAIProvider(AIProvider):
    """AI Provider using the OpenAI chat completions API in JSON mode."""
    
    name = "openai"
    
    def __init__(self, api_key: str = None, model: str = None, base_url: str = None):
        self.api_key = api_key or OPENAI_API_KEY
        self.model = model or OPENAI_MODEL
        if not self.api_key:
            raise ValueError(f"{type(self).__name__} API key not configured")
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url,
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
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt}
                ],
                temperature=temperature,
                max_tokens=max_tokens,
                response_format={"type": "json_object"}
            )
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"{type(self).__name__} API Error: {e}")
            raise

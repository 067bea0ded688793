"""
Base AI Provider Interface.

All AI providers must inherit from this base class and implement
all abstract methods.
"""
from abc import ABC, abstractmethod


class AIProvider(ABC):
    """
    Abstract base class for AI providers.
    
    A provider sends one system + user prompt pair to a hosted chat model
    and returns the raw text of the reply. Parsing and fallback live in
    the summarizer, not here.
    """
    
    name = "base"
    
    @abstractmethod
    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.5
    ) -> str:
        """
        Ask the model for a JSON object.
        
        Args:
            system_prompt: Instructions describing the expected JSON shape
            user_prompt: The document payload
            max_tokens: Completion budget
            temperature: Sampling temperature
            
        Returns:
            Raw reply text (expected to be a JSON object)
            
        Raises:
            Any client/transport error, including timeouts
        """
        pass

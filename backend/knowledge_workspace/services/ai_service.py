"""
Summarization strategies.

``HeuristicSummarizer`` is deterministic and never calls out.
``LLMSummarizer`` asks a hosted model for JSON and falls back to the
heuristic on any error or malformed reply. ``build_summarizer`` picks one
at startup from configuration.
"""
import json
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from pydantic import BaseModel, Field

from .providers import AIProvider, AIProviderFactory
from ..api.exceptions import AIServiceUnavailableError
from ..core.config import AI_REQUIRED, SUMMARY_INPUT_CHARS
from ..core.logging_config import get_logger
from ..utils.tag_extractor import extract_keywords

logger = get_logger(__name__)

MIN_CONTENT_LENGTH = 10

_SENTENCE_SPLIT = re.compile(r'[.!?]+')
_MIN_SENTENCE_LENGTH = 20
_SUMMARY_SENTENCES = 3
_MAX_POINTS = 7
_MIN_IMPORTANT_POINTS = 3
IMPORTANCE_KEYWORDS = ('important', 'key', 'must', 'should', 'required', 'essential', 'critical', 'main', 'primary')

SYSTEM_PROMPT = (
    "You are an expert document analyzer. Provide clear, structured summaries "
    "in JSON format with keys: summary, points, keywords."
)

USER_PROMPT_TEMPLATE = """Summarize this professional document into:
1. "summary": Short summary (2-3 sentences)
2. "points": Main bullet points (5-7 points as array)
3. "keywords": Important keywords (5-8 words as array)

DOCUMENT TITLE: {title}

TEXT:
{text}"""


class SummaryResult(BaseModel):
    summary: str
    points: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    source: str = "heuristic"  # heuristic | llm provider name


class Summarizer(ABC):
    """Turns document text into a summary, bullet points and keywords."""
    
    name = "base"
    
    @abstractmethod
    async def summarize(self, text: str, title: str) -> SummaryResult:
        """
        Summarize a document.
        
        Callers must only invoke this with at least MIN_CONTENT_LENGTH
        non-blank characters of text.
        """
        pass


class HeuristicSummarizer(Summarizer):
    """
    Deterministic summarizer.

    - summary: the first three sentences longer than 20 characters
    - points: sentences mentioning an importance keyword, topped up with
      the earliest sentences when fewer than three are found
    - keywords: most frequent non-stop words longer than three characters
    """
    
    name = "heuristic"
    
    def summarize_sync(self, text: str, title: str) -> SummaryResult:
        sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if len(s.strip()) > _MIN_SENTENCE_LENGTH]
        word_count = len(text.split())
        
        if sentences:
            summary = ". ".join(sentences[:_SUMMARY_SENTENCES]).strip() + "."
        else:
            summary = f'This document titled "{title}" contains {len(sentences)} sentences and {word_count} words.'
        
        points = [s for s in sentences if any(kw in s.lower() for kw in IMPORTANCE_KEYWORDS)][:_MAX_POINTS]
        if len(points) < _MIN_IMPORTANT_POINTS:
            for sentence in sentences:
                if len(points) >= _MAX_POINTS:
                    break
                if sentence not in points:
                    points.append(sentence)
        if not points:
            points = [
                f"Document: {title}",
                f"Total length: {len(text)} characters",
                f"Contains {len(sentences)} sentences",
                f"Word count: {word_count}",
            ]
        
        return SummaryResult(
            summary=summary,
            points=points,
            keywords=extract_keywords(text),
            source=self.name
        )
    
    async def summarize(self, text: str, title: str) -> SummaryResult:
        return self.summarize_sync(text, title)


class LLMSummarizer(Summarizer):
    """
    Summarizer backed by a hosted model, wrapping a heuristic fallback.

    The input is truncated to ``max_input_chars`` before sending. Errors,
    timeouts and replies that are not a JSON object with a non-empty
    ``summary`` are logged and answered by the fallback instead.
    """
    
    def __init__(
        self,
        provider: AIProvider,
        fallback: Optional[Summarizer] = None,
        max_input_chars: int = SUMMARY_INPUT_CHARS
    ):
        self.provider = provider
        self.fallback = fallback or HeuristicSummarizer()
        self.max_input_chars = max_input_chars
        self.name = provider.name
    
    async def summarize(self, text: str, title: str) -> SummaryResult:
        prompt = USER_PROMPT_TEMPLATE.format(title=title, text=text[:self.max_input_chars])
        logger.debug(f"Requesting LLM summary from {self.name} ({min(len(text), self.max_input_chars)} chars)")
        try:
            raw = await self.provider.complete_json(SYSTEM_PROMPT, prompt, max_tokens=1000, temperature=0.5)
            parsed = json.loads(raw)
        except Exception as e:
            logger.warning(f"LLM summarization failed ({self.name}), using heuristic fallback: {e}", exc_info=True)
            return await self.fallback.summarize(text, title)
        
        summary = parsed.get("summary") if isinstance(parsed, dict) else None
        if not isinstance(summary, str) or not summary.strip():
            logger.warning(f"LLM reply from {self.name} has no usable summary, using heuristic fallback")
            return await self.fallback.summarize(text, title)
        
        points = _string_list(parsed.get("points"))
        keywords = _string_list(parsed.get("keywords"))
        if not points or not keywords:
            backup = await self.fallback.summarize(text, title)
            points = points or backup.points
            keywords = keywords or backup.keywords
        
        return SummaryResult(summary=summary.strip(), points=points, keywords=keywords, source=self.name)


class UnconfiguredSummarizer(Summarizer):
    """Used when AI is mandatory but no provider could be configured."""
    
    name = "unconfigured"
    
    async def summarize(self, text: str, title: str) -> SummaryResult:
        raise AIServiceUnavailableError("AI service is not configured")


def _string_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def build_summarizer(
    provider: Optional[AIProvider] = None,
    ai_required: bool = AI_REQUIRED,
    use_configured_provider: bool = True
) -> Summarizer:
    """
    Choose the summarizer once at startup.
    
    Args:
        provider: Explicit provider (tests); defaults to AIProviderFactory's choice
        ai_required: When True and no provider exists, summarization answers 503
        use_configured_provider: Set False to skip the factory lookup
        
    Returns:
        LLMSummarizer, HeuristicSummarizer, or UnconfiguredSummarizer
    """
    if provider is None and use_configured_provider:
        provider = AIProviderFactory.get_provider()
    
    if provider is not None:
        logger.info(f"Summarizer: LLM ({provider.name}) with heuristic fallback")
        return LLMSummarizer(provider)
    if ai_required:
        logger.warning("Summarizer: AI_REQUIRED is set but no provider is configured")
        return UnconfiguredSummarizer()
    logger.info("Summarizer: heuristic only")
    return HeuristicSummarizer()

"""
Summarizer tests: heuristic rules, LLM path and its fallback.
"""
import json
from unittest.mock import AsyncMock, Mock

import pytest

from knowledge_workspace.api.exceptions import AIServiceUnavailableError
from knowledge_workspace.services.ai_service import (
    HeuristicSummarizer,
    LLMSummarizer,
    UnconfiguredSummarizer,
    build_summarizer,
)
from knowledge_workspace.utils.tag_extractor import DEFAULT_KEYWORDS

REPORT = (
    "The quarterly report covers revenue across all regions. "
    "It is important to note that costs rose faster than sales. "
    "Management believes the main driver was logistics spending! "
    "Teams should review supplier contracts before renewal? "
    "Hiring stayed flat during the entire period. "
    "Marketing campaigns performed roughly as forecast."
)


def make_provider(reply=None, error=None):
    provider = Mock()
    provider.name = "openai"
    provider.complete_json = AsyncMock(return_value=reply, side_effect=error)
    return provider


class TestHeuristicSummarizer:
    """Deterministic summarization rules"""

    def test_summary_is_first_three_sentences(self):
        result = HeuristicSummarizer().summarize_sync(REPORT, "Q3 report")

        assert result.summary == (
            "The quarterly report covers revenue across all regions. "
            "It is important to note that costs rose faster than sales. "
            "Management believes the main driver was logistics spending."
        )
        assert result.source == "heuristic"

    def test_points_prefer_importance_keywords(self):
        result = HeuristicSummarizer().summarize_sync(REPORT, "Q3 report")

        assert result.points == [
            "It is important to note that costs rose faster than sales",
            "Management believes the main driver was logistics spending",
            "Teams should review supplier contracts before renewal",
        ]

    def test_points_backfilled_with_earliest_sentences(self):
        text = (
            "The first sentence is long enough to count. "
            "A critical remark appears in the second sentence. "
            "The third sentence is plain and unremarkable."
        )
        result = HeuristicSummarizer().summarize_sync(text, "Notes")

        assert result.points == [
            "A critical remark appears in the second sentence",
            "The first sentence is long enough to count",
            "The third sentence is plain and unremarkable",
        ]

    def test_points_capped_at_seven(self):
        text = ". ".join(f"Item {i} is an important requirement to track" for i in range(12)) + "."
        result = HeuristicSummarizer().summarize_sync(text, "List")

        assert len(result.points) == 7

    def test_short_fragments_use_template_and_defaults(self):
        result = HeuristicSummarizer().summarize_sync("It is. Go on.", "Memo")

        assert result.summary == 'This document titled "Memo" contains 0 sentences and 4 words.'
        assert result.points[0] == "Document: Memo"
        assert len(result.points) == 4
        assert result.keywords == DEFAULT_KEYWORDS

    def test_keywords_ranked_by_frequency(self):
        text = "Kafka streams events. Kafka stores events durably. Consumers read kafka topics."
        result = HeuristicSummarizer().summarize_sync(text, "Kafka")

        assert result.keywords[:2] == ["kafka", "events"]
        assert all(len(word) > 3 for word in result.keywords)

    async def test_never_returns_empty_lists(self):
        for text in ["", "a b c", "!!!???...", REPORT]:
            result = await HeuristicSummarizer().summarize(text, "Title")
            assert result.summary
            assert result.points
            assert result.keywords


class TestLLMSummarizer:
    """LLM path with heuristic fallback"""

    async def test_uses_llm_reply(self):
        reply = json.dumps({"summary": "Costs outpaced sales.", "points": ["Costs up"], "keywords": ["costs"]})
        provider = make_provider(reply=reply)

        result = await LLMSummarizer(provider).summarize(REPORT, "Q3 report")

        assert result.summary == "Costs outpaced sales."
        assert result.points == ["Costs up"]
        assert result.keywords == ["costs"]
        assert result.source == "openai"

    async def test_input_truncated_before_sending(self):
        reply = json.dumps({"summary": "ok", "points": ["p"], "keywords": ["k"]})
        provider = make_provider(reply=reply)

        await LLMSummarizer(provider, max_input_chars=100).summarize("x" * 5000, "Long")

        _, prompt = provider.complete_json.call_args.args[:2]
        assert "x" * 100 in prompt
        assert "x" * 101 not in prompt

    async def test_falls_back_when_provider_raises(self):
        provider = make_provider(error=RuntimeError("upstream 500"))

        result = await LLMSummarizer(provider).summarize(REPORT, "Q3 report")

        assert result.source == "heuristic"
        assert result.summary.startswith("The quarterly report covers revenue")
        assert result.points
        assert result.keywords

    async def test_falls_back_on_invalid_json(self):
        provider = make_provider(reply="Sure! Here is your summary: ...")

        result = await LLMSummarizer(provider).summarize(REPORT, "Q3 report")

        assert result.source == "heuristic"

    async def test_falls_back_on_missing_summary(self):
        provider = make_provider(reply=json.dumps({"points": ["a"], "keywords": ["b"]}))

        result = await LLMSummarizer(provider).summarize(REPORT, "Q3 report")

        assert result.source == "heuristic"

    async def test_missing_lists_filled_from_heuristic(self):
        provider = make_provider(reply=json.dumps({"summary": "Short take.", "points": "not a list"}))

        result = await LLMSummarizer(provider).summarize(REPORT, "Q3 report")

        assert result.summary == "Short take."
        assert result.points == HeuristicSummarizer().summarize_sync(REPORT, "Q3 report").points
        assert result.keywords


class TestBuildSummarizer:
    """Strategy chosen once from configuration"""

    def test_heuristic_without_provider(self):
        summarizer = build_summarizer(ai_required=False, use_configured_provider=False)
        assert isinstance(summarizer, HeuristicSummarizer)

    def test_llm_wraps_heuristic(self):
        summarizer = build_summarizer(provider=make_provider(reply="{}"))
        assert isinstance(summarizer, LLMSummarizer)
        assert isinstance(summarizer.fallback, HeuristicSummarizer)

    async def test_required_but_unconfigured_raises(self):
        summarizer = build_summarizer(ai_required=True, use_configured_provider=False)

        assert isinstance(summarizer, UnconfiguredSummarizer)
        with pytest.raises(AIServiceUnavailableError):
            await summarizer.summarize(REPORT, "Q3 report")

    def test_heuristic_provider_setting_builds_heuristic(self):
        # AI_PROVIDER=heuristic in the test environment
        assert isinstance(build_summarizer(ai_required=False), HeuristicSummarizer)

"""Tests for AnalysisService and the analysis parser."""

import json

import pytest

from src.core.exceptions import AnalysisFailedError
from src.core.models import Sentiment
from src.services.analysis import (
    AnalysisService,
    analysis_from_dict,
    fallback_analysis,
    parse_analysis,
)
from src.services.analysis.analyzer import ANALYSIS_PROMPT, PARSE_FAILURE_SUMMARY

TRANSCRIPT = "Hello, this is a test recording about planning a team meeting..."


class TestAnalyze:
    async def test_valid_reply(self, mock_llm):
        result = await AnalysisService(mock_llm).analyze(TRANSCRIPT)

        assert result.summary == "A short planning call."
        assert result.sentiment == Sentiment.positive
        assert 3 <= len(result.tags) <= 8
        assert result.highlights[0].timestamp == 12.0
        assert result.action_items == ["Send invite"]

    async def test_prompt_and_settings(self, mock_llm):
        await AnalysisService(mock_llm).analyze(TRANSCRIPT)

        args, kwargs = mock_llm.generate.call_args
        assert args[0] == f"{ANALYSIS_PROMPT}{TRANSCRIPT}"
        assert kwargs == {"temperature": 0.3, "max_tokens": 2048}

    async def test_fenced_reply(self, mock_llm):
        mock_llm.generate.return_value = (
            '```json\n{"summary": "Fenced", "sentiment": "negative", "tags": ["a"]}\n```'
        )
        result = await AnalysisService(mock_llm).analyze(TRANSCRIPT)
        assert result.summary == "Fenced"
        assert result.sentiment == Sentiment.negative

    async def test_malformed_reply_falls_back(self, mock_llm):
        mock_llm.generate.return_value = "Sure! Here is my analysis: {not json"

        result = await AnalysisService(mock_llm).analyze(TRANSCRIPT)

        assert result == fallback_analysis()
        assert result.summary == PARSE_FAILURE_SUMMARY

    async def test_missing_reply_falls_back(self, mock_llm):
        mock_llm.generate.return_value = None
        result = await AnalysisService(mock_llm).analyze(TRANSCRIPT)
        assert result.summary == PARSE_FAILURE_SUMMARY

    async def test_empty_text_rejected(self, mock_llm):
        with pytest.raises(AnalysisFailedError):
            await AnalysisService(mock_llm).analyze("   ")
        mock_llm.generate.assert_not_awaited()


class TestParse:
    def test_fallback_shape(self):
        dumped = fallback_analysis().model_dump(mode="json", by_alias=True)
        assert dumped == {
            "summary": "Analysis could not be completed due to parsing error",
            "keyPoints": ["Raw transcription available"],
            "sentiment": "neutral",
            "tags": ["transcription"],
            "highlights": [],
            "actionItems": [],
        }

    def test_unknown_sentiment_is_neutral(self):
        result = parse_analysis(json.dumps({"summary": "s", "sentiment": "ecstatic"}))
        assert result.sentiment == Sentiment.neutral

    def test_non_list_fields_become_empty(self):
        result = parse_analysis(
            json.dumps({"summary": "s", "tags": "one,two", "keyPoints": None, "highlights": {}})
        )
        assert result.tags == []
        assert result.key_points == []
        assert result.highlights == []

    def test_highlight_timestamps_coerced(self):
        result = analysis_from_dict(
            {
                "summary": "s",
                "highlights": [
                    {"content": "a", "timestamp": "42"},
                    {"content": "b", "timestamp": "soon"},
                    {"content": "", "timestamp": 3},
                    "not a dict",
                ],
            }
        )
        assert [(h.content, h.timestamp) for h in result.highlights] == [
            ("a", 42.0),
            ("b", None),
        ]

    @pytest.mark.parametrize("raw", ["[]", '"text"', '{"tags": ["x"]}', '{"summary": "  "}'])
    def test_unusable_objects(self, raw):
        assert parse_analysis(raw) is None

"""
Transcript analysis service.

Asks the LLM for a single JSON object (summary, key points, sentiment,
tags, highlights, action items). A reply that cannot be parsed into that
shape is replaced by a fixed neutral fallback instead of failing the call;
only transport / upstream failures propagate.
"""

import json
import logging
import math

from src.core.exceptions import AnalysisFailedError
from src.core.models import AnalysisHighlight, AnalysisResult, Sentiment
from src.core.utils import strip_code_fences
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)

TEMPERATURE = 0.3
MAX_OUTPUT_TOKENS = 2048

PARSE_FAILURE_SUMMARY = "Analysis could not be completed due to parsing error"

ANALYSIS_PROMPT = """You are an expert at analyzing voice recordings and conversations. \
Your task is to analyze the provided transcription and return a structured JSON response \
with the following format:

{
  "summary": "A concise 2-3 sentence summary of the main content",
  "keyPoints": ["Array of 3-5 key points or insights from the recording"],
  "sentiment": "positive|neutral|negative",
  "tags": ["Array of 3-8 relevant tags/topics"],
  "highlights": [
    {
      "content": "Important quote or insight",
      "timestamp": "estimated time in seconds (number)"
    }
  ],
  "actionItems": ["Array of any action items or next steps mentioned"]
}

Provide practical, useful analysis that would help someone review and search through \
their recordings. Return ONLY the JSON object, no additional text or formatting.

Please analyze this voice recording transcription: """


def fallback_analysis() -> AnalysisResult:
    """The neutral stand-in returned when the model's reply is unusable."""
    return AnalysisResult(
        summary=PARSE_FAILURE_SUMMARY,
        key_points=["Raw transcription available"],
        sentiment=Sentiment.neutral,
        tags=["transcription"],
        highlights=[],
        action_items=[],
    )


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    items = (str(item).strip() for item in value if isinstance(item, str | int | float))
    return [item for item in items if item]


def _highlights(value) -> list[AnalysisHighlight]:
    if not isinstance(value, list):
        return []
    result = []
    for item in value:
        if not isinstance(item, dict) or not item.get("content"):
            continue
        timestamp = item.get("timestamp")
        try:
            timestamp = float(timestamp) if timestamp is not None else None
        except (TypeError, ValueError):
            timestamp = None
        if timestamp is not None and not math.isfinite(timestamp):
            timestamp = None
        result.append(AnalysisHighlight(content=str(item["content"]), timestamp=timestamp))
    return result


def parse_analysis(raw: str | None) -> AnalysisResult | None:
    """Parse the model's reply; return None if it is not a usable analysis object."""
    if not raw:
        return None
    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError:
        return None
    return analysis_from_dict(data)


def analysis_from_dict(data) -> AnalysisResult | None:
    """Normalise a decoded analysis object; None unless it carries a summary."""
    if not isinstance(data, dict):
        return None

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        return None

    sentiment = data.get("sentiment")
    if not isinstance(sentiment, str) or sentiment not in Sentiment.__members__:
        sentiment = Sentiment.neutral

    return AnalysisResult(
        summary=summary.strip(),
        key_points=_string_list(data.get("keyPoints")),
        sentiment=Sentiment(sentiment),
        tags=_string_list(data.get("tags")),
        highlights=_highlights(data.get("highlights")),
        action_items=_string_list(data.get("actionItems")),
    )


class AnalysisService:
    """Produces an :class:`AnalysisResult` for a transcript.

    Args:
        llm: Any text-capable provider.
    """

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    async def analyze(self, text: str | None) -> AnalysisResult:
        """Analyze one transcript.

        Raises:
            AnalysisFailedError: ``text`` is empty.
            UpstreamError: The provider answered with a non-success status.
            ConnectionError / TimeoutError: The provider was unreachable.
        """
        if not text or not text.strip():
            raise AnalysisFailedError("No transcription text provided")

        logger.info("Analyzing transcription, length: %s", len(text))
        raw = await self._llm.generate(
            f"{ANALYSIS_PROMPT}{text}",
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
        )

        result = parse_analysis(raw)
        if result is None:
            logger.warning("Could not parse analysis reply; using fallback. Raw: %.200s", raw)
            return fallback_analysis()
        return result

"""
Claude LLM provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``) to interact with
the Claude API. Text only: it can back the analysis function but not
transcription. SDK status errors are translated to :class:`UpstreamError`
so callers see the same upstream status/body shape as with Gemini.
"""

import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError, UpstreamError
from src.services.llm.base import BaseLLM, InlineAudio

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider."""

    supports_audio = False

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.3,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.claude_api_key
        if not self._api_key:
            raise ConfigurationError("Claude API key not configured")
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = AsyncAnthropic(api_key=self._api_key)

    async def generate(
        self,
        prompt: str,
        audio: InlineAudio | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str | None:
        """Send a single user message and return the first text block."""
        if audio is not None:
            raise ValueError("ClaudeLLM does not accept audio input")

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens or self._max_tokens,
                temperature=temperature if temperature is not None else self._temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except APITimeoutError as exc:
            logger.warning("Claude API timeout: %s", exc)
            raise TimeoutError(f"Claude API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("Claude API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
        except APIStatusError as exc:
            logger.error("Claude API error status=%s details=%s", exc.status_code, exc.message)
            raise UpstreamError(exc.status_code, exc.response.text, provider="Claude") from exc

        if not response.content:
            return None
        return getattr(response.content[0], "text", None) or None

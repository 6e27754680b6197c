"""
Gemini LLM provider implementation.

Calls the Generative Language REST API (``models/{model}:generateContent``)
with ``httpx.AsyncClient``. Audio is sent as an ``inline_data`` part so the
same provider serves both transcription and analysis. Non-success responses
are raised as :class:`UpstreamError` with the upstream status and raw body.
No retries: every failure surfaces to the caller on the first attempt.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.exceptions import ConfigurationError, UpstreamError
from src.services.llm.base import BaseLLM, InlineAudio

logger = logging.getLogger(__name__)


def _first_candidate_text(payload: dict) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or None if any hop is missing."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text or None


class GeminiLLM(BaseLLM):
    """Gemini REST provider (multimodal).

    Args:
        api_key: API key; falls back to settings.
        model: Model name, e.g. ``gemini-2.5-flash``.
        base_url: API root; overridable for tests.
        temperature: Default sampling temperature.
        max_tokens: Default ``maxOutputTokens``.
        client: Optional pre-built ``httpx.AsyncClient`` (tests inject a mock transport).
    """

    supports_audio = True

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 2048,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        if not self._api_key:
            raise ConfigurationError("Gemini API key not configured")
        self._model = model or settings.gemini_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout or settings.gemini_timeout
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/v1beta/models/{self._model}:generateContent"

    def _build_body(
        self,
        prompt: str,
        audio: InlineAudio | None,
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict:
        parts: list[dict] = [{"text": prompt}]
        if audio is not None:
            parts.append({"inline_data": {"mime_type": audio.mime_type, "data": audio.data}})
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": temperature if temperature is not None else self._temperature,
                "maxOutputTokens": max_tokens or self._max_tokens,
            },
        }

    async def _post(self, body: dict) -> httpx.Response:
        params = {"key": self._api_key}
        if self._client is not None:
            return await self._client.post(self.endpoint, params=params, json=body)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self.endpoint, params=params, json=body)

    async def generate(
        self,
        prompt: str,
        audio: InlineAudio | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str | None:
        """Send one ``generateContent`` request and return the first candidate's text."""
        body = self._build_body(prompt, audio, temperature, max_tokens)
        try:
            response = await self._post(body)
        except httpx.TimeoutException as exc:
            logger.warning("Gemini API timeout: %s", exc)
            raise TimeoutError(f"Gemini API request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Gemini API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Gemini API: {exc}") from exc

        logger.info("Gemini response status: %s", response.status_code)
        if response.is_error:
            logger.error(
                "Gemini API error status=%s details=%s", response.status_code, response.text
            )
            raise UpstreamError(response.status_code, response.text, provider="Gemini")

        return _first_candidate_text(response.json())

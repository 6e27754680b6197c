"""
HTTP client for the two serverless functions.

The pipeline never talks to the generative-AI endpoint directly: it invokes
``transcribe-audio`` and ``analyze-recording`` over HTTP and interprets
their JSON contracts. Both return a body on failure too (status 500), so
the parsed body is returned regardless of status; interpretation is the
caller's job.
"""

import logging

import httpx

from src.core.config import get_settings

logger = logging.getLogger(__name__)


class FunctionsClient:
    """Invokes the transcription and analysis functions.

    Args:
        base_url: Functions root, e.g. ``http://localhost:8001/functions/v1``.
        timeout: Per-request timeout in seconds.
        client: Optional pre-built ``httpx.AsyncClient`` (tests inject a mock transport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.functions_base_url).rstrip("/")
        self._timeout = timeout or settings.functions_timeout
        self._client = client

    async def _invoke(self, name: str, body: dict) -> dict:
        url = f"{self._base_url}/{name}"
        try:
            if self._client is not None:
                response = await self._client.post(url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body)
        except httpx.TimeoutException as exc:
            raise TimeoutError(f"Function {name} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ConnectionError(f"Failed to invoke function {name}: {exc}") from exc

        logger.info("Function %s responded %s", name, response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ValueError(
                f"Function {name} returned a non-JSON body (status {response.status_code})"
            ) from exc
        if not isinstance(payload, dict):
            raise ValueError(f"Function {name} returned an unexpected body")
        return payload

    async def transcribe(self, audio_b64: str) -> dict:
        """``POST transcribe-audio {audio}`` -> ``{text, language}`` or ``{error, ...}``."""
        return await self._invoke("transcribe-audio", {"audio": audio_b64})

    async def analyze(self, text: str) -> dict:
        """``POST analyze-recording {text}`` -> analysis JSON (possibly with ``error``)."""
        return await self._invoke("analyze-recording", {"text": text})

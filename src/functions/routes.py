"""
Serverless function endpoints: ``transcribe-audio`` and ``analyze-recording``.

Each handler is stateless: settings (and therefore the upstream API key)
are loaded on every invocation, and every failure is turned into the
function's own JSON error shape rather than the API-wide error envelope.
Both endpoints answer CORS pre-flight with a permissive allow-list.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from src.core.config import Settings
from src.core.exceptions import UpstreamError
from src.core.models import AnalyzeRequest, TranscribeRequest
from src.services.analysis import AnalysisService
from src.services.llm import BaseLLM, create_llm
from src.services.transcription import TranscriptionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

LLMFactory = Callable[[], BaseLLM]


def _make_transcription_llm() -> BaseLLM:
    settings = Settings()
    return create_llm(
        "gemini",
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
    )


def _make_analysis_llm() -> BaseLLM:
    settings = Settings()
    if settings.analysis_provider == "claude":
        return create_llm("claude", api_key=settings.claude_api_key, model=settings.claude_model)
    return create_llm(
        "gemini",
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
    )


def get_transcription_llm_factory() -> LLMFactory:
    """Dependency: how the transcription handler obtains its provider."""
    return _make_transcription_llm


def get_analysis_llm_factory() -> LLMFactory:
    """Dependency: how the analysis handler obtains its provider."""
    return _make_analysis_llm


def _error_message(exc: Exception) -> str:
    return getattr(exc, "detail", None) or str(exc) or type(exc).__name__


def _json(content: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


# ---------------------------------------------------------------------------
# transcribe-audio
# ---------------------------------------------------------------------------


@router.options("/transcribe-audio")
async def transcribe_preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/transcribe-audio")
async def transcribe_audio(
    request: Request,
    llm_factory: LLMFactory = Depends(get_transcription_llm_factory),
) -> JSONResponse:
    """Transcribe base64 ``audio/webm``.

    Returns ``200 {text, language}``; ``500 {error, details, gemini_status}``
    when the upstream model rejects the request; ``500 {error, type,
    timestamp}`` for every other failure.
    """
    logger.info("Starting transcription request...")
    try:
        body = TranscribeRequest.model_validate(await request.json())
        if not body.audio:
            raise ValueError("No audio data provided")
        service = TranscriptionService(llm_factory())
        result = await service.transcribe(body.audio)
        return _json(result.model_dump())

    except UpstreamError as exc:
        return _json(
            {
                "error": f"{exc.provider} API error: {exc.upstream_status}",
                "details": exc.body,
                "gemini_status": exc.upstream_status,
            },
            status_code=500,
        )
    except Exception as exc:
        logger.exception("Error in transcribe-audio function")
        return _json(
            {
                "error": _error_message(exc),
                "type": type(exc).__name__,
                "timestamp": datetime.now(UTC).isoformat(),
            },
            status_code=500,
        )


# ---------------------------------------------------------------------------
# analyze-recording
# ---------------------------------------------------------------------------


def _failed_analysis(error: str) -> dict:
    return {
        "error": error,
        "summary": "Analysis failed",
        "keyPoints": [],
        "sentiment": "neutral",
        "tags": [],
        "highlights": [],
        "actionItems": [],
    }


@router.options("/analyze-recording")
async def analyze_preflight() -> PlainTextResponse:
    return PlainTextResponse("ok", headers=CORS_HEADERS)


@router.post("/analyze-recording")
async def analyze_recording(
    request: Request,
    llm_factory: LLMFactory = Depends(get_analysis_llm_factory),
) -> JSONResponse:
    """Analyze a transcript.

    An unparseable model reply still yields ``200`` with the neutral fallback
    object; transport, upstream and configuration failures yield ``500`` with
    ``error`` plus fallback-shaped fields.
    """
    try:
        body = AnalyzeRequest.model_validate(await request.json())
        if not body.text:
            raise ValueError("No transcription text provided")
        service = AnalysisService(llm_factory())
        result = await service.analyze(body.text)
        return _json(result.model_dump(mode="json", by_alias=True))

    except UpstreamError as exc:
        logger.error("Error in analyze-recording function: %s", exc.detail)
        return _json(_failed_analysis(f"{exc.detail} - {exc.body}"), status_code=500)
    except Exception as exc:
        logger.exception("Error in analyze-recording function")
        return _json(_failed_analysis(_error_message(exc)), status_code=500)

"""Tests for TranscriptionService."""

import pytest

from src.core.exceptions import PayloadTooLargeError, TranscriptionFailedError
from src.services.llm.base import InlineAudio
from src.services.transcription import TranscriptionService, check_payload_size
from src.services.transcription.transcriber import (
    MAX_OUTPUT_TOKENS,
    TEMPERATURE,
    TRANSCRIBE_PROMPT,
)


async def test_returns_trimmed_text(mock_llm):
    mock_llm.generate.return_value = "  Hello, this is a test.\n"
    service = TranscriptionService(mock_llm)

    result = await service.transcribe("QUJD")

    assert result.text == "Hello, this is a test."
    assert result.language == "auto-detected"


async def test_sends_fixed_prompt_and_settings(mock_llm):
    mock_llm.generate.return_value = "text"
    service = TranscriptionService(mock_llm)

    await service.transcribe("QUJD")

    mock_llm.generate.assert_awaited_once_with(
        TRANSCRIBE_PROMPT,
        audio=InlineAudio(data="QUJD", mime_type="audio/webm"),
        temperature=TEMPERATURE,
        max_tokens=MAX_OUTPUT_TOKENS,
    )
    assert TEMPERATURE == 0.1
    assert MAX_OUTPUT_TOKENS == 8192


async def test_missing_audio(mock_llm):
    with pytest.raises(TranscriptionFailedError, match="No audio data provided"):
        await TranscriptionService(mock_llm).transcribe("")
    mock_llm.generate.assert_not_awaited()


async def test_oversized_audio_rejected_before_call(mock_llm):
    service = TranscriptionService(mock_llm, max_chars=10)

    with pytest.raises(PayloadTooLargeError):
        await service.transcribe("A" * 11)

    mock_llm.generate.assert_not_awaited()


async def test_empty_model_reply(mock_llm):
    mock_llm.generate.return_value = None
    with pytest.raises(TranscriptionFailedError, match="No transcription text returned"):
        await TranscriptionService(mock_llm).transcribe("QUJD")


def test_text_only_provider_rejected(mock_llm):
    mock_llm.supports_audio = False
    with pytest.raises(ValueError):
        TranscriptionService(mock_llm)


def test_payload_at_limit_is_accepted():
    check_payload_size("A" * 10, limit=10)

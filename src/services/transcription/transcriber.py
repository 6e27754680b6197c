"""Audio transcription through a multimodal LLM.

Sends base64 audio plus a fixed verbatim-transcription instruction to the
configured provider and returns the trimmed text. Oversized payloads are
rejected before any upstream call is made.
"""

import logging

from src.core.config import get_settings
from src.core.exceptions import PayloadTooLargeError, TranscriptionFailedError
from src.core.models import TranscriptionResult
from src.services.llm.base import BaseLLM, InlineAudio

logger = logging.getLogger(__name__)

TRANSCRIBE_PROMPT = (
    "Please transcribe this audio file. "
    "Return only the transcribed text, no additional formatting or commentary."
)
AUDIO_MIME_TYPE = "audio/webm"
TEMPERATURE = 0.1
MAX_OUTPUT_TOKENS = 8192


def check_payload_size(audio_b64: str, limit: int | None = None) -> None:
    """Raise :class:`PayloadTooLargeError` if the encoded audio is over the ceiling."""
    limit = limit if limit is not None else get_settings().max_audio_base64_chars
    if len(audio_b64) > limit:
        raise PayloadTooLargeError(len(audio_b64), limit)


class TranscriptionService:
    """Transcribes base64 ``audio/webm`` with an audio-capable LLM.

    Args:
        llm: Provider with ``supports_audio`` set.
        max_chars: Encoded-length ceiling (defaults to settings).
    """

    def __init__(self, llm: BaseLLM, max_chars: int | None = None) -> None:
        if not llm.supports_audio:
            raise ValueError(f"{type(llm).__name__} cannot transcribe audio")
        self._llm = llm
        self._max_chars = max_chars

    async def transcribe(self, audio_b64: str | None) -> TranscriptionResult:
        """Transcribe one recording.

        Raises:
            TranscriptionFailedError: No audio given, or the model returned no text.
            PayloadTooLargeError: Encoded audio exceeds the ceiling.
            UpstreamError: The provider answered with a non-success status.
        """
        if not audio_b64:
            raise TranscriptionFailedError("No audio data provided")
        check_payload_size(audio_b64, self._max_chars)

        logger.info("Processing audio data, length: %s", len(audio_b64))
        text = await self._llm.generate(
            TRANSCRIBE_PROMPT,
            audio=InlineAudio(data=audio_b64, mime_type=AUDIO_MIME_TYPE),
            temperature=TEMPERATURE,
            max_tokens=MAX_OUTPUT_TOKENS,
        )
        text = (text or "").strip()
        if not text:
            raise TranscriptionFailedError("No transcription text returned")

        logger.info("Transcription successful, text length: %s", len(text))
        return TranscriptionResult(text=text)

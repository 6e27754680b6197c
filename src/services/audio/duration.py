"""Duration probe for recorded audio using pydub."""

import asyncio
import io
import logging

from pydub import AudioSegment

logger = logging.getLogger(__name__)


def probe_duration(data: bytes, fmt: str = "webm") -> int | None:
    """Return the audio length in whole seconds (rounded down).

    Args:
        data: Encoded audio bytes.
        fmt: Container format hint passed to ffmpeg.

    Returns:
        Seconds, or None if the audio cannot be decoded.
    """
    try:
        audio = AudioSegment.from_file(io.BytesIO(data), format=fmt)
    except Exception as exc:
        logger.warning("Could not determine audio duration: %s", exc)
        return None
    return int(len(audio) / 1000)


async def probe_duration_async(data: bytes, fmt: str = "webm") -> int | None:
    """Run :func:`probe_duration` off the event loop (ffmpeg is blocking)."""
    return await asyncio.to_thread(probe_duration, data, fmt)

"""Recorder state machine.

Drives a :class:`BaseAudioSource` through ``idle -> recording <-> paused ->
stopped``, accumulates the encoded chunks it delivers and keeps an elapsed
``MM:SS`` counter refreshed by a one-second ticker task. Time spent paused is
not counted.

Usage::

    async with Recorder(source, on_tick=send_tick) as recorder:
        await recorder.start()
        ...
        audio = await recorder.stop()
"""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from src.core.exceptions import InvalidRecorderStateError
from src.core.utils import format_duration
from src.services.audio.source import (
    CHUNK_TIMESLICE_MS,
    DEFAULT_CONSTRAINTS,
    BaseAudioSource,
    CaptureConstraints,
)

logger = logging.getLogger(__name__)

TickCallback = Callable[[str], Awaitable[None] | None]


class RecorderState(StrEnum):
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass
class RecordedAudio:
    """The result of a finished recording session."""

    data: bytes
    mime_type: str
    duration_seconds: int
    chunk_count: int

    @property
    def duration_formatted(self) -> str:
        return format_duration(self.duration_seconds)


class Recorder:
    """Single-session microphone recorder.

    Args:
        source: Capture backend; opened on :meth:`start`, closed on
            stop, discard or teardown.
        on_tick: Called with the ``MM:SS`` display once per tick.
        constraints: Capture parameters requested from the source.
        clock: Monotonic time function (injectable for tests).
        tick_interval: Seconds between ticker refreshes.
    """

    def __init__(
        self,
        source: BaseAudioSource,
        on_tick: TickCallback | None = None,
        constraints: CaptureConstraints = DEFAULT_CONSTRAINTS,
        clock: Callable[[], float] = time.monotonic,
        tick_interval: float = 1.0,
    ) -> None:
        self._source = source
        self._on_tick = on_tick
        self._constraints = constraints
        self._clock = clock
        self._tick_interval = tick_interval

        self._state = RecorderState.IDLE
        self._chunks: list[bytes] = []
        self._mime_type: str | None = None
        self._started_at = 0.0
        self._paused_at: float | None = None
        self._paused_total = 0.0
        self._ticker: asyncio.Task | None = None
        self._source_open = False

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def chunk_count(self) -> int:
        return len(self._chunks)

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds recorded so far, excluding paused spans."""
        if self._state == RecorderState.IDLE:
            return 0
        now = self._paused_at if self._paused_at is not None else self._clock()
        return max(int(now - self._started_at - self._paused_total), 0)

    @property
    def duration(self) -> str:
        """Elapsed time as ``MM:SS``."""
        return format_duration(self.elapsed_seconds)

    async def start(self) -> None:
        """Acquire the device and begin capturing.

        A stopped recorder starts a fresh session. On a capture error the
        recorder stays idle and the error propagates unchanged.
        """
        if self._state in (RecorderState.RECORDING, RecorderState.PAUSED):
            raise InvalidRecorderStateError("start", self._state.value)

        self._reset()
        self._state = RecorderState.IDLE
        self._mime_type = await self._source.open(
            self._constraints, self._on_chunk, CHUNK_TIMESLICE_MS
        )
        self._source_open = True
        self._started_at = self._clock()
        self._state = RecorderState.RECORDING
        self._ticker = asyncio.create_task(self._tick_loop())
        logger.info("Recording started (%s)", self._mime_type)

    async def pause(self) -> None:
        if self._state != RecorderState.RECORDING:
            return
        await self._source.pause()
        self._paused_at = self._clock()
        self._state = RecorderState.PAUSED

    async def resume(self) -> None:
        if self._state != RecorderState.PAUSED:
            return
        await self._source.resume()
        if self._paused_at is not None:
            self._paused_total += self._clock() - self._paused_at
        self._paused_at = None
        self._state = RecorderState.RECORDING

    async def toggle_pause(self) -> None:
        if self._state == RecorderState.RECORDING:
            await self.pause()
        elif self._state == RecorderState.PAUSED:
            await self.resume()

    async def stop(self) -> RecordedAudio | None:
        """Finish the session and return the captured audio.

        Returns None when nothing is being recorded.
        """
        if self._state not in (RecorderState.RECORDING, RecorderState.PAUSED):
            return None

        await self._source.flush()
        duration = self.elapsed_seconds
        if self._paused_at is None:
            self._paused_at = self._clock()
        await self._release()
        self._state = RecorderState.STOPPED

        audio = RecordedAudio(
            data=b"".join(self._chunks),
            mime_type=self._mime_type or "audio/webm",
            duration_seconds=duration,
            chunk_count=len(self._chunks),
        )
        logger.info(
            "Recording stopped: %s chunks, %s bytes, %s",
            audio.chunk_count,
            len(audio.data),
            audio.duration_formatted,
        )
        return audio

    async def discard(self) -> None:
        """Drop the captured audio and return to idle."""
        await self._release()
        self._reset()
        self._state = RecorderState.IDLE

    async def aclose(self) -> None:
        """Release the device and ticker (teardown path)."""
        await self._release()

    async def __aenter__(self) -> "Recorder":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _on_chunk(self, data: bytes) -> None:
        if self._state == RecorderState.RECORDING and data:
            self._chunks.append(data)

    def _reset(self) -> None:
        self._chunks = []
        self._mime_type = None
        self._started_at = 0.0
        self._paused_at = None
        self._paused_total = 0.0

    async def _release(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                pass
            self._ticker = None
        if self._source_open:
            self._source_open = False
            await self._source.close()

    async def _tick_loop(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            if self._state != RecorderState.RECORDING or self._on_tick is None:
                continue
            try:
                result = self._on_tick(self.duration)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Tick callback failed")

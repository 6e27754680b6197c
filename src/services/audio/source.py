"""Capture sources feeding the recorder.

A source owns the microphone handle. ``open`` acquires it with fixed
capture constraints and starts delivering encoded chunks at a fixed
timeslice; ``close`` releases it. The recorder guarantees ``close`` is
called exactly once per opened session.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from src.core.exceptions import (
    DeviceNotFoundError,
    PermissionDeniedError,
    UnsupportedEnvironmentError,
)

logger = logging.getLogger(__name__)

PREFERRED_MIME_TYPE = "audio/webm;codecs=opus"
FALLBACK_MIME_TYPE = "audio/webm"
CHUNK_TIMESLICE_MS = 100

ChunkCallback = Callable[[bytes], None]
ReleaseCallback = Callable[[], Awaitable[None] | None]


@dataclass(frozen=True)
class CaptureConstraints:
    """Microphone parameters requested on every ``open``."""

    sample_rate: int = 44100
    channel_count: int = 1
    echo_cancellation: bool = True
    noise_suppression: bool = True
    auto_gain_control: bool = True

    def as_media_constraints(self) -> dict:
        """Shape expected by ``navigator.mediaDevices.getUserMedia``."""
        return {
            "audio": {
                "sampleRate": self.sample_rate,
                "channelCount": self.channel_count,
                "echoCancellation": self.echo_cancellation,
                "noiseSuppression": self.noise_suppression,
                "autoGainControl": self.auto_gain_control,
            }
        }


DEFAULT_CONSTRAINTS = CaptureConstraints()


class BaseAudioSource(ABC):
    """Interface every capture backend implements."""

    @abstractmethod
    async def open(
        self,
        constraints: CaptureConstraints,
        on_chunk: ChunkCallback,
        timeslice_ms: int = CHUNK_TIMESLICE_MS,
    ) -> str:
        """Acquire the device and start delivering chunks.

        Returns:
            The MIME type of the chunks that will be delivered.

        Raises:
            PermissionDeniedError / DeviceNotFoundError / UnsupportedEnvironmentError
        """

    @abstractmethod
    async def pause(self) -> None:
        """Stop delivering chunks without releasing the device."""

    @abstractmethod
    async def resume(self) -> None:
        """Continue delivering chunks after :meth:`pause`."""

    @abstractmethod
    async def flush(self) -> None:
        """Deliver any chunk still buffered by the encoder."""

    @abstractmethod
    async def close(self) -> None:
        """Release the device. Safe to call on a source that never opened."""


# DOMException names reported by getUserMedia / MediaRecorder
_CAPTURE_ERRORS = {
    "NotAllowedError": PermissionDeniedError,
    "SecurityError": PermissionDeniedError,
    "NotFoundError": DeviceNotFoundError,
    "OverconstrainedError": DeviceNotFoundError,
    "NotReadableError": DeviceNotFoundError,
    "NotSupportedError": UnsupportedEnvironmentError,
    "TypeError": UnsupportedEnvironmentError,
}


def capture_error_from_name(name: str) -> Exception:
    """Map a browser capture failure to one of the three recorder errors."""
    error_cls = _CAPTURE_ERRORS.get(name)
    if error_cls is None:
        return PermissionDeniedError(
            "Failed to start recording. Please check microphone permissions."
        )
    return error_cls()


class StreamingAudioSource(BaseAudioSource):
    """Source whose device lives in a remote client (e.g. a browser tab).

    The client performs ``getUserMedia`` with the constraints it is sent,
    then either reports the failure name or streams binary chunks which the
    transport hands to :meth:`push`. Closing asks the client to stop its
    tracks through *release_device*.

    Args:
        capture_error: DOMException name reported by the client, if capture failed.
        mime_type: MIME type the client's encoder produces.
        supported: False when the client has no media-capture API at all.
        release_device: Called (and awaited if async) when the source closes.
    """

    def __init__(
        self,
        capture_error: str | None = None,
        mime_type: str | None = None,
        supported: bool = True,
        release_device: ReleaseCallback | None = None,
    ) -> None:
        self._capture_error = capture_error
        self._mime_type = mime_type or PREFERRED_MIME_TYPE
        self._supported = supported
        self._release_device = release_device
        self._on_chunk: ChunkCallback | None = None
        self._paused = False
        self.is_open = False
        self.constraints: CaptureConstraints | None = None

    async def open(
        self,
        constraints: CaptureConstraints,
        on_chunk: ChunkCallback,
        timeslice_ms: int = CHUNK_TIMESLICE_MS,
    ) -> str:
        if not self._supported:
            raise UnsupportedEnvironmentError()
        if self._capture_error:
            raise capture_error_from_name(self._capture_error)
        if not self._mime_type.startswith(FALLBACK_MIME_TYPE):
            raise UnsupportedEnvironmentError(
                f"Unsupported recording format: {self._mime_type}"
            )

        self.constraints = constraints
        self._on_chunk = on_chunk
        self._paused = False
        self.is_open = True
        logger.debug("Streaming source open (%s, timeslice=%sms)", self._mime_type, timeslice_ms)
        return self._mime_type

    def push(self, data: bytes) -> None:
        """Hand one encoded chunk from the client to the recorder."""
        if self.is_open and not self._paused and data and self._on_chunk is not None:
            self._on_chunk(data)

    async def pause(self) -> None:
        self._paused = True

    async def resume(self) -> None:
        self._paused = False

    async def flush(self) -> None:
        """Chunks arrive already encoded; nothing is buffered server-side."""

    async def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self._on_chunk = None
        if self._release_device is not None:
            result = self._release_device()
            if inspect.isawaitable(result):
                await result

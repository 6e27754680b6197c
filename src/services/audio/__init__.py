"""
Audio module - Capture sources, recorder state machine and duration probe.
"""

from .duration import probe_duration, probe_duration_async
from .recorder import RecordedAudio, Recorder, RecorderState
from .source import (
    DEFAULT_CONSTRAINTS,
    BaseAudioSource,
    CaptureConstraints,
    StreamingAudioSource,
)

__all__ = [
    "DEFAULT_CONSTRAINTS",
    "BaseAudioSource",
    "CaptureConstraints",
    "RecordedAudio",
    "Recorder",
    "RecorderState",
    "StreamingAudioSource",
    "probe_duration",
    "probe_duration_async",
]

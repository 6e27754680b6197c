"""Tests for the pydub-based duration probe."""

from src.services.audio import probe_duration, probe_duration_async


def test_wav_duration(sample_wav_bytes):
    """A two-second WAV decodes to 2 whole seconds."""
    assert probe_duration(sample_wav_bytes, fmt="wav") == 2


def test_undecodable_audio_returns_none(sample_webm_bytes):
    """Garbage input yields None instead of raising."""
    assert probe_duration(b"not audio at all", fmt="wav") is None


async def test_async_probe(sample_wav_bytes):
    assert await probe_duration_async(sample_wav_bytes, fmt="wav") == 2

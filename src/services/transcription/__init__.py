"""
Transcription module - audio to text through a multimodal LLM.
"""

from .transcriber import TranscriptionService, check_payload_size

__all__ = ["TranscriptionService", "check_payload_size"]

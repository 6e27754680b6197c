"""
Abstract base class for LLM providers.

All LLM implementations (Gemini, Claude) must implement this interface,
enabling provider-agnostic business logic in the service layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class InlineAudio:
    """Base64 audio attached to a multimodal prompt."""

    data: str
    mime_type: str = "audio/webm"


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    #: Whether ``generate`` accepts ``audio``.
    supports_audio: bool = False

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        audio: InlineAudio | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str | None:
        """Generate a response for one prompt, optionally with audio attached.

        Args:
            prompt: The instruction text sent to the model.
            audio: Optional inline audio part (multimodal providers only).
            temperature: Sampling temperature override.
            max_tokens: Output token ceiling override.

        Returns:
            The text of the first candidate, or ``None`` when the model
            returned no text.

        Raises:
            UpstreamError: The endpoint answered with a non-success status.
            ConnectionError: The endpoint could not be reached.
            TimeoutError: The request timed out.
        """

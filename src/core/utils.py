"""Shared utility functions for EchoVault."""

import re


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON from LLM responses."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```\w*\n?", "", text)
        text = re.sub(r"\n?```$", "", text)
    return text.strip()


def format_duration(seconds: float | int) -> str:
    """Format a duration as zero-padded ``MM:SS`` (whole seconds, rounded down).

    Minutes are not wrapped at 60, so 3725 seconds reads ``62:05``.
    """
    total = max(int(seconds), 0)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"

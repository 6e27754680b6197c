"""UI formatting helpers."""

from datetime import datetime

_SENTIMENT_BADGES = {
    "positive": ":green[positive]",
    "negative": ":red[negative]",
    "neutral": ":gray[neutral]",
}


def format_date(value: str | None) -> str:
    """ISO timestamp -> ``YYYY-MM-DD`` (unparseable input is returned unchanged)."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        return value


def sentiment_badge(sentiment: str | None) -> str:
    return _SENTIMENT_BADGES.get(sentiment or "neutral", _SENTIMENT_BADGES["neutral"])


def format_timestamp(seconds: int | None) -> str:
    """Highlight offset as ``M:SS``."""
    if seconds is None:
        return "--:--"
    minutes, secs = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{secs:02d}"

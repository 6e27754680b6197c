"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """EchoVault application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        gemini_api_key: Key for the Generative Language API (``GEMINI_API_KEY``).
        analysis_provider: LLM backend for the analysis function ("gemini" or "claude").
        functions_base_url: Where the pipeline reaches the two serverless functions.
        database_url: Async SQLAlchemy connection string for SQLite.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Gemini (Generative Language API) ---
    gemini_api_key: str = ""  # Required by both functions
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_timeout: float = 120.0

    # --- Analysis provider ---
    # "gemini" (default) or "claude" for the text-only analysis function
    analysis_provider: str = "gemini"
    claude_api_key: str = ""  # Required when analysis_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # --- Serverless functions ---
    functions_base_url: str = "http://localhost:8001/functions/v1"
    functions_timeout: float = 180.0
    functions_port: int = 8001
    # Upper bound on the base64-encoded audio accepted for transcription
    max_audio_base64_chars: int = 10_000_000

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- Storage ---
    # Paths are relative to the project root; absolute paths also supported
    database_url: str = "sqlite+aiosqlite:///data/echovault.db"
    storage_dir: str = "data/storage"  # Object storage root (one subdir per bucket)
    storage_bucket: str = "recordings"
    public_base_url: str = "http://localhost:8000"  # Prefix for public object URLs


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()

"""Shared pytest fixtures for the EchoVault test suite.

Provides mock LLM providers, an in-memory SQLite database, a temporary
object-storage bucket and small audio payloads.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock

import pytest

from src.core.models import UserContext

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock multimodal LLM provider.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface with a default
        generate response containing a valid analysis object.
    """
    from src.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.supports_audio = True
    llm.generate.return_value = (
        '{"summary": "A short planning call.", "keyPoints": ["Plan the meeting"], '
        '"sentiment": "positive", "tags": ["planning", "meeting", "team"], '
        '"highlights": [{"content": "Let us meet Friday", "timestamp": 12}], '
        '"actionItems": ["Send invite"]}'
    )
    return llm


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user():
    return UserContext(user_id="user-1")


@pytest.fixture
def other_user():
    return UserContext(user_id="user-2")


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.pool import StaticPool

    from src.services.storage import models_db  # noqa: F401
    from src.services.storage.database import Base, create_engine

    engine = create_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def repository(db_session):
    """Create a RecordingRepository bound to the test session."""
    from src.services.storage.repository import RecordingRepository

    return RecordingRepository(db_session)


@pytest.fixture
def use_test_db(db_engine):
    """Point ``get_session()`` at the in-memory engine for code that opens its own sessions."""
    from src.services.storage import database

    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()


# ---------------------------------------------------------------------------
# Storage Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def storage(tmp_path):
    """A filesystem bucket under a temporary directory."""
    from src.services.storage.object_store import LocalObjectStorage

    return LocalObjectStorage(
        root=tmp_path / "storage",
        bucket="recordings",
        public_base_url="http://test",
    )


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_webm_bytes():
    """Opaque bytes standing in for an encoded WebM clip (not decodable)."""
    return b"\x1a\x45\xdf\xa3" + b"\x00" * 256


@pytest.fixture
def sample_wav_bytes():
    """Two seconds of a 440Hz sine wave as a WAV file (16kHz, 16-bit, mono).

    Returns:
        bytes: Complete WAV file contents.
    """
    sample_rate = 16000
    amplitude = 16000
    frames = b"".join(
        struct.pack("<h", int(amplitude * math.sin(2 * math.pi * 440.0 * i / sample_rate)))
        for i in range(sample_rate * 2)
    )
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(frames)
    return buf.getvalue()

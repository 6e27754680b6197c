"""Integration test fixtures for EchoVault.

Provides an async HTTP client and a sync TestClient (for WebSocket) wired
to a real repository, a temporary audio bucket and a mocked functions
client, so the whole save-and-process flow runs without upstream calls.
"""

import itertools
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from src.api import deps
from src.api.app import create_app
from src.core.config import Settings
from src.services.events import RecordingEvents
from src.services.functions_client import FunctionsClient
from src.services.orchestrator import PipelineOrchestrator
from src.services.storage import database
from src.services.storage.database import create_engine

USER_HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def functions():
    """Functions client whose transcription and analysis always succeed."""
    client = AsyncMock(spec=FunctionsClient)
    client.transcribe.return_value = {
        "text": "Hello, this is a test recording about planning a team meeting.",
        "language": "auto-detected",
    }
    client.analyze.return_value = {
        "summary": "Planning the team meeting.",
        "keyPoints": ["Meeting on Friday"],
        "sentiment": "positive",
        "tags": ["planning", "meeting", "team"],
        "highlights": [{"content": "Let us meet Friday", "timestamp": 4}],
        "actionItems": ["Send invite"],
    }
    return client


@pytest.fixture
def events():
    return RecordingEvents()


@pytest.fixture
def orchestrator(storage, functions, events):
    ticks = itertools.count(1700000000)
    return PipelineOrchestrator(
        storage,
        functions,
        events,
        settings=Settings(),
        clock=lambda: float(next(ticks)),
    )


@pytest.fixture(autouse=True)
def fixed_duration():
    with patch(
        "src.services.orchestrator.probe_duration_async",
        new=AsyncMock(return_value=65),
    ) as probe:
        yield probe


@pytest.fixture
def app(storage, events, orchestrator):
    """A fresh application with storage, events and pipeline overridden."""
    application = create_app()
    application.dependency_overrides[deps.get_storage] = lambda: storage
    application.dependency_overrides[deps.get_events] = lambda: events
    application.dependency_overrides[deps.get_orchestrator] = lambda: orchestrator
    return application


@pytest.fixture
async def async_client(app, db_engine):
    """AsyncClient backed by the in-memory test engine, identified as user-1."""
    database._engine = db_engine
    database._session_factory = None
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=USER_HEADERS
    ) as c:
        yield c
    database.reset_engine()


@pytest.fixture
def test_client(app, tmp_path):
    """Synchronous TestClient for WebSocket tests.

    Uses a file-backed SQLite database so the engine is created and used
    on the TestClient's own event loop; the app lifespan creates the tables.
    """
    database._engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'ws.db'}")
    database._session_factory = None
    with TestClient(app) as c:
        yield c
    database.reset_engine()

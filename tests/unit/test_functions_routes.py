"""Tests for the transcribe-audio and analyze-recording function endpoints.

The LLM provider factory dependencies are overridden with mocks so the
HTTP contracts (status codes, bodies, CORS headers) can be asserted.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.exceptions import ConfigurationError, UpstreamError
from src.functions import routes
from src.functions.app import create_app

CORS_ORIGIN = "access-control-allow-origin"


@pytest.fixture
def app(mock_llm):
    application = create_app()
    application.dependency_overrides[routes.get_transcription_llm_factory] = lambda: (
        lambda: mock_llm
    )
    application.dependency_overrides[routes.get_analysis_llm_factory] = lambda: (
        lambda: mock_llm
    )
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# CORS pre-flight
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("path", ["transcribe-audio", "analyze-recording"])
async def test_preflight(client, path):
    resp = await client.options(f"/functions/v1/{path}")
    assert resp.status_code == 200
    assert resp.text == "ok"
    assert resp.headers[CORS_ORIGIN] == "*"
    assert resp.headers["access-control-allow-headers"] == (
        "authorization, x-client-info, apikey, content-type"
    )


# ---------------------------------------------------------------------------
# transcribe-audio
# ---------------------------------------------------------------------------


class TestTranscribe:
    async def test_success(self, client, mock_llm):
        mock_llm.generate.return_value = "Hello world"

        resp = await client.post("/functions/v1/transcribe-audio", json={"audio": "QUJD"})

        assert resp.status_code == 200
        assert resp.json() == {"text": "Hello world", "language": "auto-detected"}
        assert resp.headers[CORS_ORIGIN] == "*"

    async def test_upstream_error(self, client, mock_llm):
        mock_llm.generate.side_effect = UpstreamError(400, '{"error": "bad audio"}')

        resp = await client.post("/functions/v1/transcribe-audio", json={"audio": "QUJD"})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Gemini API error: 400",
            "details": '{"error": "bad audio"}',
            "gemini_status": 400,
        }

    async def test_missing_audio(self, client):
        resp = await client.post("/functions/v1/transcribe-audio", json={})

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "No audio data provided"
        assert body["type"] == "ValueError"
        assert "timestamp" in body

    async def test_missing_api_key(self, app, client):
        def _no_key():
            raise ConfigurationError("Gemini API key not configured")

        app.dependency_overrides[routes.get_transcription_llm_factory] = lambda: _no_key

        resp = await client.post("/functions/v1/transcribe-audio", json={"audio": "QUJD"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "Gemini API key not configured"

    async def test_payload_too_large(self, client, mock_llm, monkeypatch):
        monkeypatch.setattr(
            "src.services.transcription.transcriber.get_settings",
            lambda: type("S", (), {"max_audio_base64_chars": 4})(),
        )

        resp = await client.post("/functions/v1/transcribe-audio", json={"audio": "QUJDRA=="})

        assert resp.status_code == 500
        assert resp.json()["type"] == "PayloadTooLargeError"
        mock_llm.generate.assert_not_awaited()


# ---------------------------------------------------------------------------
# analyze-recording
# ---------------------------------------------------------------------------


class TestAnalyze:
    async def test_success(self, client):
        resp = await client.post(
            "/functions/v1/analyze-recording",
            json={"text": "Hello, this is a test recording about planning a team meeting..."},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert set(body) == {
            "summary",
            "keyPoints",
            "sentiment",
            "tags",
            "highlights",
            "actionItems",
        }
        assert body["sentiment"] in ("positive", "neutral", "negative")
        assert 3 <= len(body["tags"]) <= 8

    async def test_malformed_json_returns_fallback_200(self, client, mock_llm):
        mock_llm.generate.return_value = "not json"

        resp = await client.post("/functions/v1/analyze-recording", json={"text": "hi"})

        assert resp.status_code == 200
        assert resp.json()["summary"] == "Analysis could not be completed due to parsing error"
        assert resp.json()["tags"] == ["transcription"]

    async def test_upstream_error(self, client, mock_llm):
        mock_llm.generate.side_effect = UpstreamError(503, "overloaded")

        resp = await client.post("/functions/v1/analyze-recording", json={"text": "hi"})

        assert resp.status_code == 500
        assert resp.json() == {
            "error": "Gemini API error: 503 - overloaded",
            "summary": "Analysis failed",
            "keyPoints": [],
            "sentiment": "neutral",
            "tags": [],
            "highlights": [],
            "actionItems": [],
        }
        assert resp.headers[CORS_ORIGIN] == "*"

    async def test_connection_error(self, client, mock_llm):
        mock_llm.generate.side_effect = ConnectionError("Failed to connect to Gemini API")

        resp = await client.post("/functions/v1/analyze-recording", json={"text": "hi"})

        assert resp.status_code == 500
        assert resp.json()["summary"] == "Analysis failed"
        assert resp.json()["error"] == "Failed to connect to Gemini API"

    async def test_missing_text(self, client):
        resp = await client.post("/functions/v1/analyze-recording", json={})
        assert resp.status_code == 500
        assert resp.json()["summary"] == "Analysis failed"

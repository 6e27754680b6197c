"""Unit tests for the Streamlit-side APIClient.

Validates that requests go to the right endpoints with the right
parameters, and that transport and HTTP failures become categorised
:class:`APIError` instances.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from src.ui.api_client import APIClient, APIError


@pytest.fixture
def client():
    """Create an APIClient with a mocked httpx.Client."""
    with patch("src.ui.api_client.httpx.Client") as mock_cls:
        mock_http = MagicMock()
        mock_cls.return_value = mock_http
        api = APIClient(base_url="http://test:8000", user_id="user-1")
        api._mock_http = mock_http  # expose for assertions
        api._mock_cls = mock_cls
        yield api


def _response(payload=None):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


def _status_error(status: int, json_body=None, text: str = "") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://test:8000/x")
    if json_body is not None:
        response = httpx.Response(status, json=json_body, request=request)
    else:
        response = httpx.Response(status, text=text, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestConstruction:
    def test_identity_header(self, client):
        kwargs = client._mock_cls.call_args.kwargs
        assert kwargs["base_url"] == "http://test:8000"
        assert kwargs["headers"] == {"X-User-Id": "user-1"}


class TestRecordings:
    def test_upload(self, client):
        client._mock_http.post.return_value = _response({"id": "r1"})

        result = client.upload_recording(b"audio", title="Standup")

        client._mock_http.post.assert_called_once_with(
            "/api/v1/recordings",
            files={"file": ("recording.webm", b"audio", "audio/webm")},
            data={"title": "Standup"},
            timeout=300.0,
        )
        assert result == {"id": "r1"}

    def test_upload_without_title(self, client):
        client._mock_http.post.return_value = _response({"id": "r1"})
        client.upload_recording(b"audio")
        assert client._mock_http.post.call_args.kwargs["data"] is None

    def test_list_omits_missing_limit(self, client):
        client._mock_http.get.return_value = _response([])
        client.list_recordings()
        client._mock_http.get.assert_called_once_with(
            "/api/v1/recordings", params={"offset": 0}
        )

    def test_rename(self, client):
        client._mock_http.patch.return_value = _response({"title": "New"})
        client.rename_recording("r1", "New")
        client._mock_http.patch.assert_called_once_with(
            "/api/v1/recordings/r1", json={"title": "New"}
        )

    def test_download_error_returns_none(self, client):
        client._mock_http.get.return_value.raise_for_status.side_effect = _status_error(
            404, {"detail": "Recording not found", "code": "RECORDING_NOT_FOUND"}
        )
        assert client.download_recording("r1") is None


class TestViews:
    def test_search(self, client):
        client._mock_http.get.return_value = _response([])
        client.search("team")
        client._mock_http.get.assert_called_once_with("/api/v1/search", params={"q": "team"})

    def test_folder_membership(self, client):
        client._mock_http.put.return_value = _response({"recording_ids": ["r1"]})
        client.add_to_folder("f1", "r1")
        client._mock_http.put.assert_called_once_with("/api/v1/folders/f1/recordings/r1")


class TestErrors:
    def test_http_error_carries_detail_and_code(self, client):
        client._mock_http.get.return_value.raise_for_status.side_effect = _status_error(
            401, {"detail": "Authentication required", "code": "AUTH_REQUIRED"}
        )

        with pytest.raises(APIError) as exc_info:
            client.get_stats()

        assert exc_info.value.category == "http"
        assert exc_info.value.message == "Authentication required"
        assert exc_info.value.code == "AUTH_REQUIRED"

    def test_http_error_with_text_body(self, client):
        client._mock_http.get.return_value.raise_for_status.side_effect = _status_error(
            502, text="Bad gateway"
        )
        with pytest.raises(APIError, match="Bad gateway"):
            client.get_graph()

    def test_connection_error(self, client):
        client._mock_http.get.side_effect = httpx.ConnectError("refused")
        with pytest.raises(APIError) as exc_info:
            client.health_check()
        assert exc_info.value.category == "connection"

    def test_timeout(self, client):
        client._mock_http.get.side_effect = httpx.ReadTimeout("slow")
        with pytest.raises(APIError) as exc_info:
            client.list_folders()
        assert exc_info.value.category == "timeout"

    def test_check_connection(self, client):
        client._mock_http.get.side_effect = httpx.ConnectError("refused")
        ok, message = client.check_connection()
        assert ok is False
        assert "not running" in message

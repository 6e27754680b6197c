"""
Synchronous HTTP client for the EchoVault backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
Every request carries the caller's ``X-User-Id``.
"""

import logging

import httpx
import streamlit as st

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    ``code`` carries the backend error code for "http" errors.
    """

    def __init__(self, message: str, category: str = "unknown", code: str | None = None) -> None:
        self.message = message
        self.category = category
        self.code = code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    Args:
        base_url: Base URL of the EchoVault API.
        user_id: Identity sent in ``X-User-Id`` on every request.
    """

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "") -> None:
        self._base_url = base_url.rstrip("/")
        headers = {USER_HEADER: user_id} if user_id else {}
        self._client = httpx.Client(base_url=self._base_url, timeout=30.0, headers=headers)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request, mapping failures to :class:`APIError`."""
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn src.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            code = None
            try:
                body = exc.response.json()
                detail = body.get("detail", exc.response.text)
                code = body.get("code")
            except ValueError:
                detail = exc.response.text or str(exc)
            raise APIError(str(detail), category="http", code=code) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- recordings --

    def upload_recording(self, audio: bytes, title: str | None = None) -> dict:
        """Save and process a finished recording (upload, transcribe, analyze)."""
        data = {"title": title} if title else None
        return self._request(
            "post",
            "/api/v1/recordings",
            files={"file": ("recording.webm", audio, "audio/webm")},
            data=data,
            timeout=300.0,
        ).json()

    def list_recordings(self, limit: int | None = None, offset: int = 0) -> list[dict]:
        params: dict = {"offset": offset}
        if limit is not None:
            params["limit"] = limit
        return self._request("get", "/api/v1/recordings", params=params).json()

    def get_recording(self, recording_id: str) -> dict:
        return self._request("get", f"/api/v1/recordings/{recording_id}").json()

    def rename_recording(self, recording_id: str, title: str) -> dict:
        return self._request(
            "patch", f"/api/v1/recordings/{recording_id}", json={"title": title}
        ).json()

    def delete_recording(self, recording_id: str) -> dict:
        return self._request("delete", f"/api/v1/recordings/{recording_id}").json()

    def download_recording(self, recording_id: str) -> bytes | None:
        """Fetch raw audio bytes for a recording. Returns None on error."""
        try:
            return self._request("get", f"/api/v1/recordings/{recording_id}/download").content
        except APIError:
            return None

    def share_recording(self, recording_id: str) -> dict:
        return self._request("get", f"/api/v1/recordings/{recording_id}/share").json()

    # -- views --

    def search(self, query: str) -> list[dict]:
        return self._request("get", "/api/v1/search", params={"q": query}).json()

    def get_graph(self) -> dict:
        return self._request("get", "/api/v1/graph").json()

    def snapshot_graph(self) -> dict:
        return self._request("post", "/api/v1/graph/snapshot").json()

    def get_stats(self) -> dict:
        return self._request("get", "/api/v1/stats").json()

    # -- folders --

    def list_folders(self) -> list[dict]:
        return self._request("get", "/api/v1/folders").json()

    def create_folder(self, name: str) -> dict:
        return self._request("post", "/api/v1/folders", json={"name": name}).json()

    def delete_folder(self, folder_id: str) -> None:
        self._request("delete", f"/api/v1/folders/{folder_id}")

    def add_to_folder(self, folder_id: str, recording_id: str) -> dict:
        return self._request(
            "put", f"/api/v1/folders/{folder_id}/recordings/{recording_id}"
        ).json()

    def remove_from_folder(self, folder_id: str, recording_id: str) -> dict:
        return self._request(
            "delete", f"/api/v1/folders/{folder_id}/recordings/{recording_id}"
        ).json()


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000", user_id: str = "") -> APIClient:
    """Return a cached APIClient, keyed by base_url and user."""
    return APIClient(base_url=base_url, user_id=user_id)

"""
EchoVault exception hierarchy.

All application-specific exceptions inherit from EchoVaultError,
enabling centralized error handling in the API middleware layer.
"""

from datetime import UTC, datetime


class EchoVaultError(Exception):
    """Base exception for all EchoVault errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "ECHOVAULT_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class AuthenticationRequiredError(EchoVaultError):
    """Raised when a user-scoped request carries no user identity."""

    def __init__(self) -> None:
        super().__init__(
            detail="Authentication required",
            code="AUTH_REQUIRED",
            status_code=401,
        )


class ConfigurationError(EchoVaultError):
    """Raised when a required setting (e.g. an API key) is missing."""

    def __init__(self, detail: str = "Server is not configured") -> None:
        super().__init__(detail=detail, code="CONFIGURATION_ERROR", status_code=500)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------


class PermissionDeniedError(EchoVaultError):
    """Raised when microphone access is refused by the user or the browser."""

    def __init__(
        self,
        detail: str = "Microphone access denied. "
        "Please allow microphone permissions and try again.",
    ) -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED", status_code=403)


class DeviceNotFoundError(EchoVaultError):
    """Raised when no capture device is available."""

    def __init__(
        self,
        detail: str = "No microphone found. Please connect a microphone and try again.",
    ) -> None:
        super().__init__(detail=detail, code="DEVICE_NOT_FOUND", status_code=404)


class UnsupportedEnvironmentError(EchoVaultError):
    """Raised when the client environment cannot record audio at all."""

    def __init__(self, detail: str = "Your browser doesn't support audio recording.") -> None:
        super().__init__(detail=detail, code="UNSUPPORTED_ENVIRONMENT", status_code=400)


class InvalidRecorderStateError(EchoVaultError):
    """Raised when a recorder action is not valid in the current state."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            detail=f"Cannot {action} while recorder is {state}",
            code="INVALID_RECORDER_STATE",
            status_code=409,
        )


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class UploadError(EchoVaultError):
    """Raised when object storage rejects an audio upload."""

    def __init__(self, detail: str = "Failed to upload audio") -> None:
        super().__init__(detail=detail, code="UPLOAD_ERROR", status_code=502)


class StorageForbiddenError(EchoVaultError):
    """Raised when an object key lies outside the caller's namespace."""

    def __init__(self, key: str) -> None:
        super().__init__(
            detail=f"Access to object denied: {key}",
            code="STORAGE_FORBIDDEN",
            status_code=403,
        )


class RecordingNotFoundError(EchoVaultError):
    """Raised when a recording ID does not exist (or belongs to another user)."""

    def __init__(self, recording_id: str) -> None:
        super().__init__(
            detail=f"Recording not found: {recording_id}",
            code="RECORDING_NOT_FOUND",
            status_code=404,
        )


class FolderNotFoundError(EchoVaultError):
    """Raised when a folder ID does not exist (or belongs to another user)."""

    def __init__(self, folder_id: str) -> None:
        super().__init__(
            detail=f"Folder not found: {folder_id}",
            code="FOLDER_NOT_FOUND",
            status_code=404,
        )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class PayloadTooLargeError(EchoVaultError):
    """Raised when encoded audio exceeds the transcription ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            detail=f"Audio file too large ({size} > {limit} encoded characters). "
            "Please use shorter recordings.",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
        )


class TranscriptionFailedError(EchoVaultError):
    """Raised when the transcription service returns no text."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(detail=detail, code="TRANSCRIPTION_FAILED", status_code=502)


class AnalysisFailedError(EchoVaultError):
    """Raised when the analysis service returns no usable summary."""

    def __init__(self, detail: str = "Analysis failed") -> None:
        super().__init__(detail=detail, code="ANALYSIS_FAILED", status_code=502)


class PersistFailedError(EchoVaultError):
    """Raised when the recording (or its highlights) cannot be written."""

    def __init__(self, detail: str = "Failed to save recording") -> None:
        super().__init__(detail=detail, code="PERSIST_FAILED", status_code=500)


class UpstreamError(EchoVaultError):
    """Raised when the generative-AI endpoint answers with a non-success status.

    Keeps the upstream status and raw body so callers can surface them.
    """

    def __init__(self, status: int, body: str, provider: str = "Gemini") -> None:
        self.upstream_status = status
        self.body = body
        self.provider = provider
        super().__init__(
            detail=f"{provider} API error: {status}",
            code="UPSTREAM_ERROR",
            status_code=502,
        )

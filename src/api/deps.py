"""
FastAPI dependencies shared by the routers.

The caller's identity arrives in the ``X-User-Id`` header, set by the
authentication gateway in front of the API. It is turned into an explicit
:class:`UserContext` and handed to every user-scoped route; services never
look it up themselves.

Long-lived collaborators (object storage, event registry, orchestrator)
are process-wide singletons created on first use; tests replace them via
``app.dependency_overrides``.
"""

from fastapi import Header

from src.core.exceptions import AuthenticationRequiredError
from src.core.models import UserContext
from src.services.events import RecordingEvents
from src.services.functions_client import FunctionsClient
from src.services.orchestrator import PipelineOrchestrator
from src.services.storage.database import get_session
from src.services.storage.object_store import BaseObjectStorage, LocalObjectStorage
from src.services.storage.repository import RecordingRepository

USER_HEADER = "X-User-Id"

_storage: BaseObjectStorage | None = None
_events: RecordingEvents | None = None
_orchestrator: PipelineOrchestrator | None = None


def resolve_user(user_id: str | None) -> UserContext:
    """Validate a raw user id into a :class:`UserContext`."""
    if user_id is None or not user_id.strip():
        raise AuthenticationRequiredError()
    return UserContext(user_id=user_id.strip())


async def get_user_context(
    x_user_id: str | None = Header(None, alias=USER_HEADER),
) -> UserContext:
    """Require the caller's identity and make sure a profile row exists."""
    user = resolve_user(x_user_id)
    async with get_session() as session:
        await RecordingRepository(session).ensure_profile(user.user_id)
    return user


def get_storage() -> BaseObjectStorage:
    global _storage
    if _storage is None:
        _storage = LocalObjectStorage()
    return _storage


def get_events() -> RecordingEvents:
    global _events
    if _events is None:
        _events = RecordingEvents()
    return _events


def get_orchestrator() -> PipelineOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = PipelineOrchestrator(
            storage=get_storage(),
            functions=FunctionsClient(),
            events=get_events(),
        )
    return _orchestrator


def reset_dependencies() -> None:
    """Drop the cached singletons (test helper)."""
    global _storage, _events, _orchestrator
    _storage = None
    _events = None
    _orchestrator = None

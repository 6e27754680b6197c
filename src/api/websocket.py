"""WebSocket endpoints for live recording and save notifications.

``/ws/record`` drives a server-side :class:`Recorder` for a browser that
owns the microphone. The client sends JSON text frames with an ``action``
and streams the encoded chunks as binary frames; the server answers with
JSON ``WebSocketMessage`` objects::

    client -> {"action": "start", "mime_type": "audio/webm;codecs=opus"}
    client -> {"action": "start", "error": "NotAllowedError"}   (capture failed)
    client -> <binary chunk> ...
    client -> {"action": "pause" | "resume" | "toggle_pause" | "discard"}
    client -> {"action": "stop", "save": true, "title": "Standup"}

    server -> {"type": "state", "data": {"state": "recording", "duration": "00:00"}}
    server -> {"type": "tick", "data": {"duration": "00:01"}}
    server -> {"type": "release", "data": {}}      (stop the microphone tracks)
    server -> {"type": "saved", "data": <recording>}
    server -> {"type": "error", "data": {"detail": "...", "code": "..."}}

``/ws/events`` pushes a ``recording_saved`` message whenever one of the
caller's recordings is saved, so views can refetch.

Browsers cannot set headers on a WebSocket handshake, so the caller may
pass ``user_id`` as a query parameter instead of ``X-User-Id``.
"""

import json
import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from src.api.deps import USER_HEADER, get_events, get_orchestrator, resolve_user
from src.core.exceptions import EchoVaultError
from src.core.models import UserContext, WebSocketMessage, WebSocketMessageType
from src.services.audio import DEFAULT_CONSTRAINTS, Recorder, StreamingAudioSource
from src.services.audio.source import CHUNK_TIMESLICE_MS
from src.services.events import RecordingEvents, RecordingSaved
from src.services.orchestrator import PipelineOrchestrator
from src.services.storage.database import get_session
from src.services.storage.repository import RecordingRepository

logger = logging.getLogger(__name__)

router = APIRouter()

POLICY_VIOLATION = 1008


async def _send(websocket: WebSocket, type_: WebSocketMessageType, data: dict) -> None:
    msg = WebSocketMessage(type=type_, data=data)
    await websocket.send_json(msg.model_dump(mode="json"))


async def _send_error(websocket: WebSocket, detail: str, code: str) -> None:
    await _send(websocket, WebSocketMessageType.error, {"detail": detail, "code": code})


async def _authenticate(websocket: WebSocket, user_id: str | None) -> UserContext | None:
    """Accept the socket and resolve the caller, closing it if anonymous."""
    await websocket.accept()
    try:
        user = resolve_user(websocket.headers.get(USER_HEADER) or user_id)
    except EchoVaultError as exc:
        await _send_error(websocket, exc.detail, exc.code)
        await websocket.close(code=POLICY_VIOLATION)
        return None
    async with get_session() as session:
        await RecordingRepository(session).ensure_profile(user.user_id)
    return user


class _RecordSession:
    """Per-connection recorder wiring for ``/ws/record``."""

    def __init__(
        self,
        websocket: WebSocket,
        user: UserContext,
        orchestrator: PipelineOrchestrator,
    ) -> None:
        self.websocket = websocket
        self.user = user
        self.orchestrator = orchestrator
        self.source: StreamingAudioSource | None = None
        self.recorder: Recorder | None = None

    async def send_state(self) -> None:
        recorder = self.recorder
        await _send(
            self.websocket,
            WebSocketMessageType.state,
            {
                "state": recorder.state.value if recorder else "idle",
                "duration": recorder.duration if recorder else "00:00",
            },
        )

    async def _on_tick(self, duration: str) -> None:
        await _send(self.websocket, WebSocketMessageType.tick, {"duration": duration})

    async def _release_device(self) -> None:
        # close() also runs after the client has gone away
        if self.websocket.client_state == WebSocketState.CONNECTED:
            await _send(self.websocket, WebSocketMessageType.release, {})

    def push(self, data: bytes) -> None:
        if self.source is not None:
            self.source.push(data)

    async def handle(self, message: dict) -> None:
        action = message.get("action")
        if action == "start":
            await self.start(message)
        elif action in ("pause", "resume", "toggle_pause"):
            if self.recorder is not None:
                await getattr(self.recorder, action)()
            await self.send_state()
        elif action == "stop":
            title = message.get("title")
            await self.stop(
                save=bool(message.get("save", True)),
                title=str(title) if title is not None else None,
            )
        elif action == "discard":
            if self.recorder is not None:
                await self.recorder.discard()
            await self.send_state()
        else:
            await _send_error(self.websocket, f"Unknown action: {action}", "INVALID_ACTION")

    async def start(self, message: dict) -> None:
        if self.recorder is not None:
            await self.recorder.aclose()
        self.source = StreamingAudioSource(
            capture_error=message.get("error"),
            mime_type=message.get("mime_type"),
            supported=bool(message.get("supported", True)),
            release_device=self._release_device,
        )
        self.recorder = Recorder(self.source, on_tick=self._on_tick)
        try:
            await self.recorder.start()
        except EchoVaultError as exc:
            logger.info("Recording not started for %s: %s", self.user.user_id, exc.detail)
            await _send_error(self.websocket, exc.detail, exc.code)
        await self.send_state()

    async def stop(self, save: bool, title: str | None) -> None:
        audio = await self.recorder.stop() if self.recorder is not None else None
        await self.send_state()
        if audio is None:
            await _send_error(self.websocket, "Nothing is being recorded", "NOT_RECORDING")
            return
        if not save:
            return
        if not audio.data:
            await _send_error(self.websocket, "No audio was captured", "EMPTY_RECORDING")
            return

        try:
            recording = await self.orchestrator.save_and_process(audio.data, title, self.user)
        except EchoVaultError as exc:
            await _send_error(self.websocket, exc.detail, exc.code)
            return
        await _send(self.websocket, WebSocketMessageType.saved, recording.model_dump(mode="json"))

    async def close(self) -> None:
        if self.recorder is not None:
            await self.recorder.aclose()


@router.websocket("/ws/record")
async def record_ws(
    websocket: WebSocket,
    user_id: str | None = Query(None),
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> None:
    """Drive a recorder from a browser client (see module docstring)."""
    user = await _authenticate(websocket, user_id)
    if user is None:
        return

    await _send(
        websocket,
        WebSocketMessageType.connected,
        {
            "constraints": DEFAULT_CONSTRAINTS.as_media_constraints(),
            "timeslice_ms": CHUNK_TIMESLICE_MS,
        },
    )
    session = _RecordSession(websocket, user, orchestrator)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            if frame.get("bytes") is not None:
                session.push(frame["bytes"])
                continue
            try:
                message = json.loads(frame.get("text") or "")
            except json.JSONDecodeError:
                await _send_error(websocket, "Malformed message", "INVALID_MESSAGE")
                continue
            if not isinstance(message, dict):
                await _send_error(websocket, "Malformed message", "INVALID_MESSAGE")
                continue
            await session.handle(message)
    except WebSocketDisconnect:
        logger.info("Recorder socket disconnected for %s", user.user_id)
    finally:
        await session.close()


@router.websocket("/ws/events")
async def events_ws(
    websocket: WebSocket,
    user_id: str | None = Query(None),
    events: RecordingEvents = Depends(get_events),
) -> None:
    """Forward the caller's ``RecordingSaved`` events until the client leaves."""
    user = await _authenticate(websocket, user_id)
    if user is None:
        return

    async def forward(event: RecordingSaved) -> None:
        if event.user_id != user.user_id:
            return
        await _send(
            websocket,
            WebSocketMessageType.recording_saved,
            {"recording_id": event.recording_id, "title": event.title},
        )

    unsubscribe = events.subscribe(forward)
    await _send(websocket, WebSocketMessageType.connected, {"user_id": user.user_id})
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Events socket disconnected for %s", user.user_id)
    finally:
        unsubscribe()

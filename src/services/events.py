"""
Recording-saved notifications.

The orchestrator publishes a :class:`RecordingSaved` event after each
successful save; views subscribe to refetch. Subscribers are plain async
callables registered explicitly, and a failing subscriber never affects
the publisher or the other subscribers.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordingSaved:
    """Emitted once a recording row (and its highlights) is persisted."""

    user_id: str
    recording_id: str
    title: str


Subscriber = Callable[[RecordingSaved], Awaitable[None]]


class RecordingEvents:
    """Observer registry for :class:`RecordingSaved`."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    async def publish(self, event: RecordingSaved) -> None:
        for callback in list(self._subscribers):
            try:
                await callback(event)
            except Exception:
                logger.exception("Subscriber failed for recording %s", event.recording_id)

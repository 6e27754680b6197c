"""Tests for the RecordingSaved observer registry."""

from unittest.mock import AsyncMock

from src.services.events import RecordingEvents, RecordingSaved

EVENT = RecordingSaved(user_id="user-1", recording_id="rec-1", title="Standup")


async def test_publish_reaches_every_subscriber():
    events = RecordingEvents()
    first, second = AsyncMock(), AsyncMock()
    events.subscribe(first)
    events.subscribe(second)

    await events.publish(EVENT)

    first.assert_awaited_once_with(EVENT)
    second.assert_awaited_once_with(EVENT)


async def test_unsubscribe_handle():
    events = RecordingEvents()
    callback = AsyncMock()
    unsubscribe = events.subscribe(callback)
    unsubscribe()

    await events.publish(EVENT)

    callback.assert_not_awaited()
    assert events.subscriber_count == 0


async def test_failing_subscriber_does_not_block_others():
    events = RecordingEvents()
    broken = AsyncMock(side_effect=RuntimeError("boom"))
    healthy = AsyncMock()
    events.subscribe(broken)
    events.subscribe(healthy)

    await events.publish(EVENT)

    healthy.assert_awaited_once_with(EVENT)


def test_unsubscribe_unknown_is_noop():
    RecordingEvents().unsubscribe(AsyncMock())

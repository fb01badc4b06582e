"""Tests for stream module."""
import asyncio

import pytest

from idleskills.stream import EventStream, StateStream


def test_event_stream_delivers_to_all_listeners():
    stream: EventStream[int] = EventStream()
    a: list[int] = []
    b: list[int] = []
    stream.subscribe(a.append)
    stream.subscribe(b.append)
    stream.publish(1)
    stream.publish(2)
    assert a == [1, 2]
    assert b == [1, 2]


def test_event_stream_has_no_replay():
    stream: EventStream[int] = EventStream()
    stream.publish(1)
    seen: list[int] = []
    stream.subscribe(seen.append)
    assert seen == []


def test_subscription_cancel():
    stream: EventStream[int] = EventStream()
    seen: list[int] = []
    sub = stream.subscribe(seen.append)
    stream.publish(1)
    sub.cancel()
    sub.cancel()
    stream.publish(2)
    assert seen == [1]
    assert not sub.active
    assert stream.listener_count == 0


def test_listener_may_unsubscribe_during_publish():
    stream: EventStream[int] = EventStream()
    seen: list[int] = []
    subs = []

    def once(value: int) -> None:
        seen.append(value)
        subs[0].cancel()

    subs.append(stream.subscribe(once))
    stream.publish(1)
    stream.publish(2)
    assert seen == [1]


def test_state_stream_replays_latest():
    stream = StateStream(0)
    stream.publish(5)
    seen: list[int] = []
    stream.subscribe(seen.append)
    stream.publish(6)
    assert seen == [5, 6]
    assert stream.value == 6


def test_state_stream_without_initial_value():
    stream: StateStream[int] = StateStream()
    assert not stream.has_value
    with pytest.raises(LookupError):
        stream.value
    seen: list[int] = []
    stream.subscribe(seen.append)
    assert seen == []
    stream.publish(3)
    assert seen == [3]


@pytest.mark.asyncio
async def test_updates_async_iteration():
    stream: EventStream[int] = EventStream()
    received: list[int] = []

    async def consume() -> None:
        async for value in stream.updates():
            received.append(value)
            if len(received) == 3:
                break

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    for i in range(3):
        stream.publish(i)
    await asyncio.wait_for(task, timeout=1.0)
    assert received == [0, 1, 2]

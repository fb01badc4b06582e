"""Push-based pub-sub primitives used in place of raw callbacks."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable, Generic, TypeVar

from loguru import logger

T = TypeVar("T")

_UNSET = object()


class Subscription:
    """Handle returned by ``subscribe``; call ``cancel()`` to stop delivery."""

    def __init__(self, detach: Callable[[], None]) -> None:
        self._detach = detach
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._detach()


class EventStream(Generic[T]):
    """Fan-out stream with no memory: listeners only see later events."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[T], None]] = []

    def subscribe(self, listener: Callable[[T], None]) -> Subscription:
        self._listeners.append(listener)
        return Subscription(lambda: self._detach(listener))

    def publish(self, value: T) -> None:
        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(value)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _detach(self, listener: Callable[[T], None]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            logger.debug("Listener already detached from stream")

    async def updates(self) -> AsyncIterator[T]:
        """Iterate published values asynchronously, in publish order."""
        queue: asyncio.Queue[T] = asyncio.Queue()
        sub = self.subscribe(queue.put_nowait)
        try:
            while True:
                yield await queue.get()
        finally:
            sub.cancel()


class StateStream(EventStream[T]):
    """Stream holding a current value that is replayed to new subscribers."""

    def __init__(self, initial: T = _UNSET) -> None:  # type: ignore[assignment]
        super().__init__()
        self._value = initial

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            raise LookupError("StateStream has no value yet")
        return self._value  # type: ignore[return-value]

    def subscribe(self, listener: Callable[[T], None]) -> Subscription:
        sub = super().subscribe(listener)
        if self.has_value:
            listener(self._value)  # type: ignore[arg-type]
        return sub

    def publish(self, value: T) -> None:
        self._value = value
        super().publish(value)

"""Host event fan-out and one-shot waiting.

``EventSource`` is a plain listener list. ``OneShotWaiter`` subscribes on
construction, resolves on the first event matching its predicate and
unsubscribes right away, so it can be created before triggering the action
whose event it waits for.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

E = TypeVar("E")


@dataclass(frozen=True)
class TabActivated:
    """A tab became the active tab of its window."""

    tab_id: int
    window_id: int


class EventSource(Generic[E]):
    """Ordered listener registry; listeners may unsubscribe while being notified."""

    def __init__(self) -> None:
        self._listeners: list[Callable[[E], None]] = []

    def add_listener(self, listener: Callable[[E], None]) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[E], None]) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def has_listener(self, listener: Callable[[E], None]) -> bool:
        return listener in self._listeners

    def emit(self, event: E) -> None:
        for listener in list(self._listeners):
            listener(event)


class OneShotWaiter(Generic[E]):
    """Future resolved by the first matching event of ``source``.

    Must be created while an event loop is running.
    """

    def __init__(self, source: EventSource[E], predicate: Callable[[E], bool]) -> None:
        self._source = source
        self._predicate = predicate
        self._future: asyncio.Future[E] = asyncio.get_running_loop().create_future()
        source.add_listener(self._on_event)

    def _on_event(self, event: E) -> None:
        if self._future.done() or not self._predicate(event):
            return
        self._source.remove_listener(self._on_event)
        self._future.set_result(event)

    @property
    def done(self) -> bool:
        return self._future.done()

    def cancel(self) -> None:
        """Stop listening; a pending ``wait`` raises ``CancelledError``."""
        self._source.remove_listener(self._on_event)
        if not self._future.done():
            self._future.cancel()

    async def wait(self, timeout: float | None = None) -> E:
        """Return the matching event; raises ``TimeoutError`` after ``timeout`` seconds."""
        try:
            return await asyncio.wait_for(asyncio.shield(self._future), timeout)
        finally:
            self.cancel()


async def wait_for_event(
    source: EventSource[E],
    predicate: Callable[[E], bool],
    timeout: float | None = None,
) -> E:
    """Subscribe and wait for the next event of ``source`` matching ``predicate``."""
    return await OneShotWaiter(source, predicate).wait(timeout)


__all__ = ["TabActivated", "EventSource", "OneShotWaiter", "wait_for_event"]

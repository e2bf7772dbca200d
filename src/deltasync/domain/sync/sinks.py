"""In-process event sinks."""

from __future__ import annotations

import queue
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from deltasync.domain.model import CanonicalEvent


class ListSink:
    """Collect events in memory; safe to share between scheduler workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[CanonicalEvent] = []

    def emit(self, event: CanonicalEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> tuple[CanonicalEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def for_entity(self, entity_type: str) -> tuple[CanonicalEvent, ...]:
        return tuple(event for event in self.events if event.entity_type == entity_type)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


_CLOSED = object()


class QueueSink:
    """Hand events to a consumer thread through a bounded queue.

    ``emit`` blocks while the queue is full, which applies backpressure to the
    page loop. Iterating the sink yields events until ``close`` is called.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._lock = threading.Lock()
        self._closed = False

    def emit(self, event: CanonicalEvent) -> None:
        # the sentinel must stay the last item, so check and put happen under one lock
        with self._lock:
            if self._closed:
                raise RuntimeError("QueueSink is closed")
            self._queue.put(event)

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._closed = True
                self._queue.put(_CLOSED)

    def __iter__(self) -> Iterator[CanonicalEvent]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]


__all__ = ["ListSink", "QueueSink"]

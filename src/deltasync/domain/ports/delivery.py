"""Ports for handing normalized events and progress to downstream consumers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from deltasync.domain.model import CanonicalEvent, SyncProgress


@runtime_checkable
class EventSink(Protocol):
    """Receives events in emission order; shared sinks must be thread-safe."""

    def emit(self, event: CanonicalEvent) -> None: ...


class ProgressCallback(Protocol):
    def __call__(self, progress: SyncProgress) -> None: ...


__all__ = ["EventSink", "ProgressCallback"]

"""In-memory checkpoint store for tests and single-process runs."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deltasync.domain.model import SyncCheckpoint
    from deltasync.domain.ports import CheckpointStore


class InMemoryCheckpointStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._checkpoints: dict[tuple[str, str], SyncCheckpoint] = {}

    def load(self, organization_id: str, entity_type: str) -> SyncCheckpoint | None:
        with self._lock:
            return self._checkpoints.get((organization_id, entity_type))

    def save(self, checkpoint: SyncCheckpoint) -> None:
        with self._lock:
            self._checkpoints[checkpoint.key] = checkpoint

    def clear(self, organization_id: str, entity_type: str) -> None:
        with self._lock:
            self._checkpoints.pop((organization_id, entity_type), None)

    def list_checkpoints(self, organization_id: str) -> list[SyncCheckpoint]:
        with self._lock:
            return sorted(
                (cp for (org, _), cp in self._checkpoints.items() if org == organization_id),
                key=lambda checkpoint: checkpoint.entity_type,
            )


if TYPE_CHECKING:
    _store_check: CheckpointStore = InMemoryCheckpointStore()

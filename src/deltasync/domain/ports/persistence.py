"""Ports for persisting sync checkpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from deltasync.domain.model import SyncCheckpoint


@runtime_checkable
class CheckpointStore(Protocol):
    """Durable cursor storage keyed by ``(organization_id, entity_type)``.

    ``save`` replaces the stored checkpoint atomically (last writer wins). The
    store does not guard against concurrent writers for the same key.
    """

    def load(self, organization_id: str, entity_type: str) -> SyncCheckpoint | None: ...

    def save(self, checkpoint: SyncCheckpoint) -> None: ...

    def clear(self, organization_id: str, entity_type: str) -> None: ...

    def list_checkpoints(self, organization_id: str) -> Sequence[SyncCheckpoint]: ...


__all__ = ["CheckpointStore"]

"""Summaries of stored checkpoints for status reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from deltasync.domain.model import CheckpointStatus, SyncHealth

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from deltasync.domain.model import SyncCheckpoint


@dataclass(frozen=True, slots=True)
class SyncStatusSummary:
    entity_types: tuple[str, ...] = ()
    last_sync: datetime | None = None
    total_records: int = 0
    health: SyncHealth = SyncHealth.HEALTHY
    failures: dict[str, str] = field(default_factory=dict[str, str])


def summarize_checkpoints(checkpoints: Iterable[SyncCheckpoint]) -> SyncStatusSummary:
    """Fold an organization's checkpoints into one status line.

    Health is ``failed`` when every entity failed, ``partial`` when some failed
    or stopped early and ``healthy`` otherwise (including no checkpoints at all).
    """

    ordered = sorted(checkpoints, key=lambda checkpoint: checkpoint.entity_type)
    if not ordered:
        return SyncStatusSummary()

    failures = {
        checkpoint.entity_type: checkpoint.last_error or "unknown error"
        for checkpoint in ordered
        if checkpoint.status is CheckpointStatus.FAILED
    }
    if len(failures) == len(ordered):
        health = SyncHealth.FAILED
    elif failures or any(c.status is CheckpointStatus.PARTIAL for c in ordered):
        health = SyncHealth.PARTIAL
    else:
        health = SyncHealth.HEALTHY

    return SyncStatusSummary(
        entity_types=tuple(checkpoint.entity_type for checkpoint in ordered),
        last_sync=max(checkpoint.updated_at for checkpoint in ordered),
        total_records=sum(checkpoint.record_count for checkpoint in ordered),
        health=health,
        failures=failures,
    )


__all__ = ["SyncStatusSummary", "summarize_checkpoints"]

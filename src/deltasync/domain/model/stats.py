"""Ephemeral per-run statistics and progress reports."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import CheckpointStatus, Classification, ProgressStage


@dataclass(slots=True)
class SyncRunStats:
    fetched: int = 0
    created: int = 0
    updated: int = 0
    deleted: int = 0
    errors: int = 0
    pages_fetched: int = 0
    status: CheckpointStatus | None = None
    degraded: bool = False

    def count(self, classification: Classification) -> None:
        match classification:
            case Classification.CREATED:
                self.created += 1
            case Classification.UPDATED:
                self.updated += 1
            case Classification.DELETED:
                self.deleted += 1

    @property
    def emitted(self) -> int:
        return self.created + self.updated + self.deleted

    def merge(self, other: SyncRunStats) -> SyncRunStats:
        """Return the sum of two stats blocks; status and degradation are not merged."""

        return SyncRunStats(
            fetched=self.fetched + other.fetched,
            created=self.created + other.created,
            updated=self.updated + other.updated,
            deleted=self.deleted + other.deleted,
            errors=self.errors + other.errors,
            pages_fetched=self.pages_fetched + other.pages_fetched,
        )


@dataclass(frozen=True, slots=True)
class SyncProgress:
    """Progress report; ``total`` is best effort and meant for UI feedback only."""

    entity_type: str
    current: int
    stage: ProgressStage
    total: int | None = None
    message: str = ""

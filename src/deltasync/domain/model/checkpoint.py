"""Persisted resume state for one (organization, entity type) key."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from .enums import CheckpointStatus

if TYPE_CHECKING:
    from .cursor import Cursor


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class SyncCheckpoint:
    """Unit persisted by a checkpoint store.

    ``record_count`` accumulates the records processed since the last full
    resync; it is reset whenever the orchestrator degrades to the lookback horizon.
    """

    organization_id: str
    entity_type: str
    cursor: Cursor
    record_count: int = 0
    status: CheckpointStatus = CheckpointStatus.SUCCESS
    last_error: str | None = None
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def key(self) -> tuple[str, str]:
        return (self.organization_id, self.entity_type)

    def advanced(
        self,
        cursor: Cursor,
        *,
        processed: int,
        status: CheckpointStatus = CheckpointStatus.SUCCESS,
        at: datetime | None = None,
    ) -> SyncCheckpoint:
        """Return a copy moved to ``cursor`` after ``processed`` more records."""

        return replace(
            self,
            cursor=cursor,
            record_count=self.record_count + processed,
            status=status,
            last_error=None,
            updated_at=at or _utcnow(),
        )

    def failed(self, error: BaseException | str, *, at: datetime | None = None) -> SyncCheckpoint:
        """Return a copy marked as failed, keeping the current cursor."""

        return replace(
            self,
            status=CheckpointStatus.FAILED,
            last_error=str(error) or type(error).__name__,
            updated_at=at or _utcnow(),
        )

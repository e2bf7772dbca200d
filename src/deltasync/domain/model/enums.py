"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class CursorKind(StrEnum):
    TIME = "time"
    OFFSET = "offset"
    TOKEN = "token"


class CheckpointStatus(StrEnum):
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class Classification(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class ActorKind(StrEnum):
    USER = "user"
    SYSTEM = "system"
    SERVICE = "service"


class SyncState(StrEnum):
    """Lifecycle of a single orchestrator run."""

    IDLE = "idle"
    PAGING = "paging"
    DEGRADING = "degrading"
    DONE = "done"


class ProgressStage(StrEnum):
    FETCHING = "fetching"
    PROCESSING = "processing"
    COMPLETE = "complete"


class SyncHealth(StrEnum):
    HEALTHY = "healthy"
    PARTIAL = "partial"
    FAILED = "failed"

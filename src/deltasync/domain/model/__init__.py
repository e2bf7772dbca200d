"""Domain model for the sync core."""

from __future__ import annotations

from .checkpoint import SyncCheckpoint
from .cursor import Cursor
from .enums import (
    ActorKind,
    CheckpointStatus,
    Classification,
    CursorKind,
    ProgressStage,
    SyncHealth,
    SyncState,
)
from .events import Actor, CanonicalEvent, EventContext, Relationship, Target
from .records import NaturalKey, RawRecord
from .stats import SyncProgress, SyncRunStats

__all__ = [
    "Actor",
    "ActorKind",
    "CanonicalEvent",
    "CheckpointStatus",
    "Classification",
    "Cursor",
    "CursorKind",
    "EventContext",
    "NaturalKey",
    "ProgressStage",
    "RawRecord",
    "Relationship",
    "SyncCheckpoint",
    "SyncHealth",
    "SyncProgress",
    "SyncRunStats",
    "SyncState",
    "Target",
]

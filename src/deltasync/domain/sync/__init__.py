"""Sync orchestration: page loop, multi-entity scheduling, sinks, status."""

from __future__ import annotations

from .orchestrator import SyncOptions, SyncOrchestrator
from .scheduler import EntitySummary, MultiEntityScheduler, OrchestratorFactory, SchedulerResult
from .sinks import ListSink, QueueSink
from .status import SyncStatusSummary, summarize_checkpoints

__all__ = [
    "EntitySummary",
    "ListSink",
    "MultiEntityScheduler",
    "OrchestratorFactory",
    "QueueSink",
    "SchedulerResult",
    "SyncOptions",
    "SyncOrchestrator",
    "SyncStatusSummary",
    "summarize_checkpoints",
]

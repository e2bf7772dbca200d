"""Domain port definitions for adapters."""

from __future__ import annotations

from .delivery import EventSink, ProgressCallback
from .fetching import PageResult, SourceAdapter
from .persistence import CheckpointStore

__all__ = [
    "CheckpointStore",
    "EventSink",
    "PageResult",
    "ProgressCallback",
    "SourceAdapter",
]

"""SQLAlchemy adapter package for checkpoint persistence."""

from __future__ import annotations

from .checkpoint_store import SqlAlchemyCheckpointStore, build_checkpoint_store
from .mappings import create_checkpoint_tables, metadata, sync_checkpoint_table

__all__ = [
    "SqlAlchemyCheckpointStore",
    "build_checkpoint_store",
    "create_checkpoint_tables",
    "metadata",
    "sync_checkpoint_table",
]

"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from deltasync.adapters.rest import HttpPageSource
from deltasync.adapters.sqlalchemy import build_checkpoint_store
from deltasync.config import get_sync_config
from deltasync.domain.classification import WindowClassifier
from deltasync.domain.normalization import EventNormalizer
from deltasync.domain.sync import (
    MultiEntityScheduler,
    SyncOptions,
    SyncOrchestrator,
    summarize_checkpoints,
)
from deltasync.domain.time_windows import TimeWindow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from threading import Event

    from deltasync.config import SourceConfig, SyncConfig
    from deltasync.domain.normalization import DataMapper
    from deltasync.domain.ports import CheckpointStore, EventSink, ProgressCallback, SourceAdapter
    from deltasync.domain.registry import EntityTypeRegistry
    from deltasync.domain.sync import SchedulerResult, SyncStatusSummary

type SourceFactory = Callable[[str], SourceAdapter]

log = getLogger(__name__)


def sync_entities(
    *,
    organization_id: str,
    registry: EntityTypeRegistry,
    source_factory: SourceFactory,
    sink: EventSink,
    store: CheckpointStore | None = None,
    config: SyncConfig | None = None,
    entity_types: Iterable[str] | None = None,
    mappers: Mapping[str, DataMapper] | None = None,
    full_sync: bool = False,
    cancel_event: Event | None = None,
    on_progress: ProgressCallback | None = None,
) -> SchedulerResult:
    """Synchronise the registry's entity types of one organization into ``sink``."""

    effective_config = config or get_sync_config()
    effective_store = store or build_checkpoint_store()
    selected = tuple(entity_types) if entity_types is not None else registry.entity_types
    normalizer = EventNormalizer(registry, mappers=mappers)
    classifier = WindowClassifier(effective_config.creation_window)
    window = TimeWindow.lookback_of(effective_config.lookback)
    batch_id = uuid4().hex

    def orchestrator_factory(entity_type: str) -> SyncOrchestrator:
        return SyncOrchestrator(
            entity_type=entity_type,
            organization_id=organization_id,
            source=source_factory(entity_type),
            store=effective_store,
            normalizer=normalizer,
            classifier=classifier,
            options=SyncOptions(
                page_size=registry.page_size_for(entity_type, effective_config.page_size),
                window=window,
                full_sync=full_sync,
                max_pages=effective_config.max_pages,
            ),
            on_progress=on_progress,
            batch_id=batch_id,
        )

    log.info(
        "Starting %s sync for %s: entities=%s, workers=%s, full_sync=%s",
        registry.source,
        organization_id,
        ", ".join(selected) or "-",
        effective_config.max_workers,
        full_sync,
    )

    scheduler = MultiEntityScheduler(orchestrator_factory, max_workers=effective_config.max_workers)
    result = scheduler.run(selected, sink, cancel_event=cancel_event)

    totals = result.totals
    log.info(
        "Finished %s sync: emitted=%s, fetched=%s, errors=%s, failed_entities=%s",
        registry.source,
        totals.emitted,
        totals.fetched,
        totals.errors,
        sorted(result.errors),
    )
    return result


def checkpoint_status(
    *,
    organization_id: str,
    store: CheckpointStore | None = None,
) -> SyncStatusSummary:
    effective_store = store or build_checkpoint_store()
    return summarize_checkpoints(effective_store.list_checkpoints(organization_id))


def reset_checkpoint(
    *,
    organization_id: str,
    entity_type: str,
    store: CheckpointStore | None = None,
) -> None:
    """Forget the checkpoint so the next run starts from the lookback horizon."""

    effective_store = store or build_checkpoint_store()
    effective_store.clear(organization_id, entity_type)
    log.info("Cleared checkpoint for %s/%s", organization_id, entity_type)


def http_source_factory(
    source: SourceConfig,
    *,
    paths: Mapping[str, str] | None = None,
) -> SourceFactory:
    """Build one ``HttpPageSource`` per entity type; paths default to the entity name."""

    endpoints = dict(paths or {})

    def factory(entity_type: str) -> SourceAdapter:
        return HttpPageSource(
            resilience=source.resilience,
            path=endpoints.get(entity_type, entity_type),
        )

    return factory

"""Run one orchestrator per entity type, optionally on a worker pool."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from deltasync.domain.model import CheckpointStatus, SyncRunStats

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from threading import Event

    from deltasync.domain.ports import EventSink

    from .orchestrator import SyncOrchestrator

log = getLogger(__name__)

type OrchestratorFactory = Callable[[str], SyncOrchestrator]


@dataclass(frozen=True, slots=True)
class EntitySummary:
    entity_type: str
    status: CheckpointStatus | None
    emitted: int
    errors: int
    error: str | None = None


@dataclass(slots=True)
class SchedulerResult:
    """Per-entity outcome of one scheduler run.

    ``stats`` holds an entry for every entity that was attempted, including the
    ones that failed; ``errors`` only the entities whose run raised.
    """

    stats: dict[str, SyncRunStats] = field(default_factory=dict[str, SyncRunStats])
    errors: dict[str, Exception] = field(default_factory=dict[str, Exception])

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def totals(self) -> SyncRunStats:
        total = SyncRunStats()
        for stats in self.stats.values():
            total = total.merge(stats)
        return total

    def summaries(self) -> list[EntitySummary]:
        return [
            EntitySummary(
                entity_type=entity_type,
                status=stats.status,
                emitted=stats.emitted,
                errors=stats.errors,
                error=str(self.errors[entity_type]) if entity_type in self.errors else None,
            )
            for entity_type, stats in self.stats.items()
        ]


class MultiEntityScheduler:
    """Sync several entity types of one organization.

    Entities are independent: one entity failing never stops the others. Each
    entity type gets its own orchestrator from ``orchestrator_factory``, so no
    orchestrator is shared between threads.
    """

    def __init__(self, orchestrator_factory: OrchestratorFactory, *, max_workers: int = 1) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be positive")
        self.orchestrator_factory = orchestrator_factory
        self.max_workers = max_workers

    def run(
        self,
        entity_types: Iterable[str],
        sink: EventSink,
        *,
        cancel_event: Event | None = None,
    ) -> SchedulerResult:
        ordered = list(dict.fromkeys(entity_types))
        result = SchedulerResult()
        if not ordered:
            return result

        workers = min(self.max_workers, len(ordered))
        log.info("Syncing %s entity types with %s worker(s)", len(ordered), workers)
        if workers == 1:
            outcomes = [self._run_entity(entity, sink, cancel_event) for entity in ordered]
        else:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="deltasync") as pool:
                futures = [
                    pool.submit(self._run_entity, entity, sink, cancel_event) for entity in ordered
                ]
                outcomes = [future.result() for future in futures]

        for entity_type, (stats, error) in zip(ordered, outcomes, strict=True):
            result.stats[entity_type] = stats
            if error is not None:
                result.errors[entity_type] = error
        return result

    def _run_entity(
        self,
        entity_type: str,
        sink: EventSink,
        cancel_event: Event | None,
    ) -> tuple[SyncRunStats, Exception | None]:
        orchestrator: SyncOrchestrator | None = None
        try:
            orchestrator = self.orchestrator_factory(entity_type)
            return orchestrator.run(sink, cancel_event=cancel_event), None
        except Exception as exc:
            log.exception("Sync of %s failed", entity_type)
            stats = orchestrator.stats if orchestrator is not None else SyncRunStats()
            stats.status = CheckpointStatus.FAILED
            return stats, exc


__all__ = ["EntitySummary", "MultiEntityScheduler", "OrchestratorFactory", "SchedulerResult"]

"""Page loop for one entity stream: fetch, classify, normalize, checkpoint.

The orchestrator owns the resume semantics of a sync run:

* it starts from the stored checkpoint, or from the lookback horizon when there
  is none (or a full sync was requested);
* it advances and persists the checkpoint only after a page was completely
  emitted, so a crash re-delivers at most one page;
* a cursor-expired error degrades the run to a bounded resync from the lookback
  horizon, once; a second expiry in the same run is fatal;
* any other page failure persists a ``failed`` checkpoint that still points at
  the last fully consumed page and is re-raised to the caller;
* cancellation is honoured between pages only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING
from uuid import uuid4

from deltasync.domain.classification import WindowClassifier
from deltasync.domain.errors import CursorExpiredError, FatalSourceError
from deltasync.domain.model import (
    CheckpointStatus,
    ProgressStage,
    SyncCheckpoint,
    SyncProgress,
    SyncRunStats,
    SyncState,
)
from deltasync.domain.normalization import NormalizationContext
from deltasync.domain.time_windows import TimeWindow, utcnow

if TYPE_CHECKING:
    from collections.abc import Sequence
    from threading import Event

    from deltasync.domain.classification import Classifier
    from deltasync.domain.model import Cursor, RawRecord
    from deltasync.domain.normalization import EventNormalizer
    from deltasync.domain.ports import (
        CheckpointStore,
        EventSink,
        PageResult,
        ProgressCallback,
        SourceAdapter,
    )
    from deltasync.domain.time_windows import Clock

log = getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_LOOKBACK = timedelta(days=180)


def _default_window() -> TimeWindow:
    return TimeWindow(lookback=DEFAULT_LOOKBACK)


@dataclass(frozen=True, slots=True)
class SyncOptions:
    page_size: int = DEFAULT_PAGE_SIZE
    window: TimeWindow = field(default_factory=_default_window)
    full_sync: bool = False
    max_pages: int | None = None
    max_records: int | None = None

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be positive")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("max_pages must be positive")
        if self.max_records is not None and self.max_records < 1:
            raise ValueError("max_records must be positive")


class SyncOrchestrator:
    """Drive the fetch/classify/normalize loop for one (organization, entity type)."""

    def __init__(
        self,
        *,
        entity_type: str,
        organization_id: str,
        source: SourceAdapter,
        store: CheckpointStore,
        normalizer: EventNormalizer,
        classifier: Classifier | None = None,
        options: SyncOptions | None = None,
        on_progress: ProgressCallback | None = None,
        clock: Clock = utcnow,
        batch_id: str | None = None,
    ) -> None:
        self.entity_type = entity_type
        self.organization_id = organization_id
        self.source = source
        self.store = store
        self.normalizer = normalizer
        self.classifier: Classifier = classifier or WindowClassifier()
        self.options = options or SyncOptions()
        self.on_progress = on_progress
        self.clock = clock
        self.batch_id = batch_id
        self.state = SyncState.IDLE
        self.stats = SyncRunStats()

    def run(
        self,
        sink: EventSink,
        *,
        cancel_event: Event | None = None,
        run_id: str | None = None,
    ) -> SyncRunStats:
        """Sync until the source is exhausted, a cap is hit or the run is cancelled."""

        self.stats = stats = SyncRunStats()
        self.state = SyncState.IDLE
        context = NormalizationContext(
            organization_id=self.organization_id,
            batch_id=self.batch_id,
            run_id=run_id or uuid4().hex,
        )

        checkpoint = self._starting_checkpoint()
        cursor = checkpoint.cursor
        degraded = False
        log.info(
            "Starting %s sync for %s: cursor=%s, page_size=%s",
            self.entity_type,
            self.organization_id,
            cursor,
            self.options.page_size,
        )

        self.state = SyncState.PAGING
        while True:
            if cancel_event is not None and cancel_event.is_set():
                log.info("%s sync cancelled after %s pages", self.entity_type, stats.pages_fetched)
                self._save(
                    replace(checkpoint, status=CheckpointStatus.PARTIAL, updated_at=self.clock())
                )
                return self._finish(CheckpointStatus.PARTIAL, "Cancelled")

            self._report(ProgressStage.FETCHING, None, f"Fetching page {stats.pages_fetched + 1}")
            try:
                page = self.source.fetch_page(cursor, self.options.page_size)
                self._check_progress(cursor, page)
            except CursorExpiredError as exc:
                if degraded:
                    self._fail(checkpoint, exc)
                    raise FatalSourceError(
                        f"{self.entity_type} cursor expired again during full resync",
                        status_code=exc.status_code,
                    ) from exc
                degraded = True
                stats.degraded = True
                cursor = self._degrade(exc)
                checkpoint = replace(checkpoint, record_count=0)
                continue
            except Exception as exc:
                self._fail(checkpoint, exc)
                raise

            try:
                self._consume(page.records, sink, context)
            except Exception as exc:
                self._fail(checkpoint, exc)
                raise

            cursor = page.next_cursor
            capped = page.has_more and self._cap_reached()
            checkpoint = checkpoint.advanced(
                cursor,
                processed=len(page.records),
                status=CheckpointStatus.PARTIAL if capped else CheckpointStatus.SUCCESS,
                at=self.clock(),
            )
            self._save(checkpoint)
            self._report(
                ProgressStage.PROCESSING,
                page.total,
                f"Processed page {stats.pages_fetched} ({len(page.records)} records)",
            )

            if not page.has_more:
                return self._finish(CheckpointStatus.SUCCESS, "Completed")
            if capped:
                log.info("%s sync reached its run limit; resuming next run", self.entity_type)
                return self._finish(CheckpointStatus.PARTIAL, "Run limit reached")

    def _starting_checkpoint(self) -> SyncCheckpoint:
        stored = self.store.load(self.organization_id, self.entity_type)
        if stored is not None and not self.options.full_sync:
            return stored
        if stored is None:
            log.info("No checkpoint for %s; starting from lookback horizon", self.entity_type)
        else:
            log.info("Full sync requested for %s; ignoring stored checkpoint", self.entity_type)
        return SyncCheckpoint(
            organization_id=self.organization_id,
            entity_type=self.entity_type,
            cursor=self._horizon(),
            record_count=0,
            updated_at=self.clock(),
        )

    def _horizon(self) -> Cursor:
        return self.options.window.horizon(clock=self.clock)

    def _degrade(self, exc: CursorExpiredError) -> Cursor:
        self.state = SyncState.DEGRADING
        horizon = self._horizon()
        log.warning(
            "%s cursor expired (%s); degrading to full resync from %s",
            self.entity_type,
            exc,
            horizon.time or "beginning of time",
        )
        self.state = SyncState.PAGING
        return horizon

    def _check_progress(self, cursor: Cursor, page: PageResult) -> None:
        if page.has_more and page.next_cursor == cursor:
            raise FatalSourceError(
                f"{self.entity_type} source returned a page without advancing its cursor "
                f"({len(page.records)} records at {cursor})"
            )

    def _consume(
        self,
        records: Sequence[RawRecord],
        sink: EventSink,
        context: NormalizationContext,
    ) -> None:
        stats = self.stats
        stats.pages_fetched += 1
        for record in records:
            stats.fetched += 1
            try:
                classification = self.classifier(record)
                event = self.normalizer.normalize(
                    record, classification, self.entity_type, context
                )
            except Exception as exc:  # noqa: BLE001
                stats.errors += 1
                log.warning(
                    "Skipping %s record %r: %s", self.entity_type, record.natural_key, exc
                )
                continue
            sink.emit(event)
            stats.count(classification)

    def _cap_reached(self) -> bool:
        max_pages = self.options.max_pages
        max_records = self.options.max_records
        if max_pages is not None and self.stats.pages_fetched >= max_pages:
            return True
        return max_records is not None and self.stats.fetched >= max_records

    def _save(self, checkpoint: SyncCheckpoint) -> None:
        self.store.save(checkpoint)

    def _fail(self, checkpoint: SyncCheckpoint, exc: BaseException) -> None:
        log.error("%s sync failed: %s", self.entity_type, exc)
        try:
            self.store.save(checkpoint.failed(exc, at=self.clock()))
        except Exception:
            log.exception("Could not persist failed checkpoint for %s", self.entity_type)
        try:
            self._finish(CheckpointStatus.FAILED, f"Failed: {exc}")
        except Exception:
            log.exception("Progress callback failed while reporting %s failure", self.entity_type)

    def _finish(self, status: CheckpointStatus, message: str) -> SyncRunStats:
        self.stats.status = status
        self.state = SyncState.DONE
        self._report(ProgressStage.COMPLETE, None, message)
        log.info(
            "Finished %s sync: status=%s, fetched=%s, created=%s, updated=%s, deleted=%s, "
            "errors=%s, pages=%s",
            self.entity_type,
            status,
            self.stats.fetched,
            self.stats.created,
            self.stats.updated,
            self.stats.deleted,
            self.stats.errors,
            self.stats.pages_fetched,
        )
        return self.stats

    def _report(self, stage: ProgressStage, total: int | None, message: str) -> None:
        if self.on_progress is None:
            return
        self.on_progress(
            SyncProgress(
                entity_type=self.entity_type,
                current=self.stats.fetched,
                total=total,
                stage=stage,
                message=message,
            )
        )

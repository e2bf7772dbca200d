from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from deltasync.domain.model import (
    CheckpointStatus,
    Classification,
    Cursor,
    RawRecord,
    SyncCheckpoint,
    SyncRunStats,
)
from tests.helpers.sync import BASE_TIME, FIXED_NOW


def test_raw_record_requires_aware_timestamps() -> None:
    with pytest.raises(ValueError, match="modified_at"):
        RawRecord(natural_key=1, modified_at=datetime(2024, 1, 1))  # noqa: DTZ001


def test_raw_record_position_prefers_modification() -> None:
    assert RawRecord(natural_key=1, created_at=BASE_TIME).position == BASE_TIME
    later = BASE_TIME + timedelta(days=1)
    assert RawRecord(natural_key=1, created_at=BASE_TIME, modified_at=later).position == later
    assert RawRecord(natural_key=1).position is None


def test_checkpoint_advances_and_fails() -> None:
    checkpoint = SyncCheckpoint(
        organization_id="org-1",
        entity_type="res.partner",
        cursor=Cursor.at_offset(0),
        record_count=5,
        status=CheckpointStatus.FAILED,
        last_error="boom",
    )

    advanced = checkpoint.advanced(Cursor.at_offset(10), processed=10, at=FIXED_NOW)

    assert advanced.cursor == Cursor.at_offset(10)
    assert advanced.record_count == 15
    assert advanced.status is CheckpointStatus.SUCCESS
    assert advanced.last_error is None
    assert advanced.updated_at == FIXED_NOW
    assert advanced.key == ("org-1", "res.partner")

    failed = advanced.failed(TimeoutError())
    assert failed.status is CheckpointStatus.FAILED
    assert failed.last_error == "TimeoutError"
    assert failed.cursor == advanced.cursor
    assert failed.updated_at.tzinfo is UTC


def test_run_stats_count_and_merge() -> None:
    first = SyncRunStats(fetched=3, pages_fetched=1)
    for classification in (
        Classification.CREATED,
        Classification.UPDATED,
        Classification.DELETED,
    ):
        first.count(classification)
    second = SyncRunStats(fetched=2, created=2, errors=1, pages_fetched=1)

    merged = first.merge(second)

    assert first.emitted == 3
    assert merged == SyncRunStats(
        fetched=5, created=3, updated=1, deleted=1, errors=1, pages_fetched=2
    )

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from deltasync.domain.model import Cursor, CursorKind
from tests.helpers.sync import BASE_TIME, make_record


def test_cursor_kinds_reject_foreign_fields() -> None:
    with pytest.raises(ValueError, match="Time cursors"):
        Cursor(kind=CursorKind.TIME, offset=3)
    with pytest.raises(ValueError, match="Offset cursors"):
        Cursor(kind=CursorKind.OFFSET, offset=1, token="abc")
    with pytest.raises(ValueError, match="non-negative offset"):
        Cursor(kind=CursorKind.OFFSET, offset=-1)
    with pytest.raises(ValueError, match="non-empty token"):
        Cursor(kind=CursorKind.TOKEN, token="")


def test_time_cursor_requires_timezone() -> None:
    with pytest.raises(ValueError, match="timezone"):
        Cursor.at_time(datetime(2024, 1, 1))  # noqa: DTZ001


def test_origin_cursor_means_beginning_of_time() -> None:
    assert Cursor.at_time(None).is_origin
    assert not Cursor.at_time(BASE_TIME).is_origin
    assert not Cursor.at_offset(0).is_origin


def test_after_record_positions_on_modification_time() -> None:
    record = make_record("A-7", modified_offset=timedelta(minutes=5))

    cursor = Cursor.after_record(record)

    assert cursor.kind is CursorKind.TIME
    assert cursor.time == BASE_TIME + timedelta(minutes=5)
    assert cursor.last_key == "A-7"


def test_precedes_breaks_timestamp_ties_with_last_key() -> None:
    cursor = Cursor.at_time(BASE_TIME, last_key=5)
    same_time = timedelta(0)

    assert not cursor.precedes(make_record(4, modified_offset=same_time))
    assert not cursor.precedes(make_record(5, modified_offset=same_time))
    assert cursor.precedes(make_record(6, modified_offset=same_time))
    assert cursor.precedes(make_record("a", modified_offset=same_time))
    assert cursor.precedes(make_record(1, modified_offset=timedelta(seconds=1)))
    assert not cursor.precedes(make_record(99, modified_offset=-timedelta(seconds=1)))


def test_precedes_admits_everything_for_non_time_cursors() -> None:
    record = make_record(1)

    assert Cursor.at_offset(10).precedes(record)
    assert Cursor.from_token("t").precedes(record)
    assert Cursor.at_time(None).precedes(record)


@pytest.mark.parametrize(
    "cursor",
    [
        Cursor.at_time(datetime(2024, 5, 1, 8, 30, tzinfo=UTC), last_key=17),
        Cursor.at_time(None),
        Cursor.at_offset(250),
        Cursor.from_token("page-token==", last_key="SO-1"),
    ],
)
def test_cursor_dict_form_is_lossless(cursor: Cursor) -> None:
    assert Cursor.from_dict(cursor.to_dict()) == cursor


def test_from_dict_assumes_utc_for_naive_times() -> None:
    cursor = Cursor.from_dict({"kind": "time", "time": "2024-05-01T08:30:00"})

    assert cursor.time == datetime(2024, 5, 1, 8, 30, tzinfo=UTC)

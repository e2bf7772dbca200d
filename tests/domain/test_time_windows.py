from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from deltasync.domain.model import Cursor
from deltasync.domain.time_windows import TimeWindow
from tests.helpers.sync import FIXED_NOW, fixed_clock


def test_lookback_is_measured_from_the_clock() -> None:
    window = TimeWindow(lookback=timedelta(days=180))

    start, end = window.resolve(clock=fixed_clock)

    assert start == FIXED_NOW - timedelta(days=180)
    assert end is None


def test_later_of_start_and_lookback_wins() -> None:
    pinned = datetime(2024, 5, 30, tzinfo=UTC)
    window = TimeWindow(start=pinned, lookback=timedelta(days=30))

    start, _ = window.resolve(clock=fixed_clock)

    assert start == pinned


def test_lookback_is_anchored_on_end_when_given() -> None:
    end = datetime(2024, 1, 10, tzinfo=UTC)
    window = TimeWindow(end=end, lookback=timedelta(days=1))

    assert window.resolve(clock=fixed_clock) == (datetime(2024, 1, 9, tzinfo=UTC), end)


def test_empty_window_means_beginning_of_time() -> None:
    horizon = TimeWindow.lookback_of(None).horizon(clock=fixed_clock)

    assert horizon == Cursor.at_time(None)
    assert horizon.is_origin


def test_horizon_is_a_time_cursor() -> None:
    horizon = TimeWindow.lookback_of(timedelta(hours=1)).horizon(clock=fixed_clock)

    assert horizon == Cursor.at_time(FIXED_NOW - timedelta(hours=1))


def test_invalid_windows_are_rejected() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        TimeWindow(lookback=timedelta(days=-1)).resolve(clock=fixed_clock)
    with pytest.raises(ValueError, match="before end"):
        TimeWindow(
            start=datetime(2024, 2, 1, tzinfo=UTC), end=datetime(2024, 1, 1, tzinfo=UTC)
        ).resolve()
    with pytest.raises(ValueError, match="timezone"):
        TimeWindow(start=datetime(2024, 1, 1)).resolve()  # noqa: DTZ001

"""Utilities for resolving the lookback horizon of a sync run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from deltasync.domain.model import Cursor


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def _ensure_aware(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        raise ValueError("Time window values must include timezone information")
    return value.astimezone(UTC)


@dataclass(frozen=True)
class TimeWindow:
    """Describe how far back a cold start or a full resync may reach.

    ``lookback`` is measured from ``end`` (or the clock); ``start`` pins an
    absolute lower bound. When both are given the later one wins. An empty
    window means "beginning of time".
    """

    start: datetime | None = None
    end: datetime | None = None
    lookback: timedelta | None = None

    def resolve(self, *, clock: Clock = utcnow) -> tuple[datetime | None, datetime | None]:
        """Resolve the window into concrete UTC timestamps."""

        resolved_end = _ensure_aware(self.end)
        resolved_start = _ensure_aware(self.start)

        if self.lookback is not None:
            if self.lookback < timedelta(0):
                raise ValueError("Lookback duration must be non-negative")
            anchor = resolved_end or clock()
            if anchor.tzinfo is None:
                anchor = anchor.replace(tzinfo=UTC)
            anchor = anchor.astimezone(UTC)
            start_from_lookback = anchor - self.lookback
            if resolved_start is None:
                resolved_start = start_from_lookback
            else:
                resolved_start = max(resolved_start, start_from_lookback)

        if resolved_start and resolved_end and resolved_start > resolved_end:
            raise ValueError("Time window start must be before end")

        return resolved_start, resolved_end

    def horizon(self, *, clock: Clock = utcnow) -> Cursor:
        """Return the time cursor a full resync starts from."""

        start, _ = self.resolve(clock=clock)
        return Cursor.at_time(start)

    @classmethod
    def lookback_of(cls, lookback: timedelta | None) -> TimeWindow:
        return cls(lookback=lookback)


__all__ = ["Clock", "TimeWindow", "utcnow"]

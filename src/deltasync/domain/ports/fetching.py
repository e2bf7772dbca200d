"""Ports for fetching pages of raw records from an external system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from deltasync.domain.model import Cursor, RawRecord


@dataclass(frozen=True, slots=True)
class PageResult:
    """One page of raw records plus the position to resume from."""

    records: Sequence[RawRecord]
    next_cursor: Cursor
    has_more: bool
    total: int | None = field(default=None, kw_only=True)


@runtime_checkable
class SourceAdapter(Protocol):
    """Vendor entity stream, e.g. ``res.partner`` rows or a changes feed.

    Implementations raise ``CursorExpiredError``, ``TransientSourceError`` or
    ``FatalSourceError`` instead of returning partial pages.
    """

    def fetch_page(self, cursor: Cursor, page_size: int) -> PageResult: ...


__all__ = ["PageResult", "SourceAdapter"]

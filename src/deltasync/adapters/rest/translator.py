"""Translate REST page envelopes into raw records and page results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deltasync.domain.model import Cursor, CursorKind, RawRecord
from deltasync.domain.ports import PageResult

from .schema import CursorPayload, PageEnvelope, RecordPayload

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_record(payload: RecordPayload) -> RawRecord:
    return RawRecord(
        natural_key=payload.id,
        created_at=payload.created_at,
        modified_at=payload.modified_at,
        fields=dict(payload.fields),
        deleted=payload.deleted,
    )


def parse_cursor(payload: CursorPayload) -> Cursor:
    return Cursor.from_dict(payload.model_dump(mode="json"))


def parse_page(payload: object, cursor: Cursor) -> PageResult:
    """Validate ``payload`` and build the page result for a request made at ``cursor``.

    Vendors filtering on an inclusive ``since`` send the boundary records of the
    previous page again; records the time cursor already covers are dropped.
    When the envelope carries no ``next_cursor`` it is derived from ``cursor``:
    offsets move past the page and time cursors move onto its last record.
    Token streams must always send the next token while ``has_more`` is set.
    """

    envelope = PageEnvelope.model_validate(payload)
    records = [parse_record(item) for item in envelope.records]
    if cursor.kind is CursorKind.TIME:
        records = [record for record in records if cursor.precedes(record)]
    if envelope.next_cursor is not None:
        next_cursor = parse_cursor(envelope.next_cursor)
    else:
        next_cursor = _derive_next_cursor(cursor, records, has_more=envelope.has_more)
    return PageResult(
        records=tuple(records),
        next_cursor=next_cursor,
        has_more=envelope.has_more,
        total=envelope.total,
    )


def _derive_next_cursor(cursor: Cursor, records: Sequence[RawRecord], *, has_more: bool) -> Cursor:
    match cursor.kind:
        case CursorKind.OFFSET:
            return Cursor.at_offset((cursor.offset or 0) + len(records))
        case CursorKind.TIME:
            positioned = [record for record in records if record.position is not None]
            if not positioned:
                return cursor
            return Cursor.after_record(positioned[-1])
        case CursorKind.TOKEN:
            if has_more:
                raise ValueError("Token-paged response omitted next_cursor")
            return cursor


__all__ = ["parse_cursor", "parse_page", "parse_record"]

"""Public interface for the paged REST source adapter."""

from __future__ import annotations

from .client import HttpPageSource, cursor_params
from .schema import CursorPayload, PageEnvelope, RecordPayload
from .translator import parse_cursor, parse_page, parse_record

__all__ = [
    "CursorPayload",
    "HttpPageSource",
    "PageEnvelope",
    "RecordPayload",
    "cursor_params",
    "parse_cursor",
    "parse_page",
    "parse_record",
]

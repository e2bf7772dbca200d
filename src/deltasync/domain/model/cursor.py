"""Resume positions for paginated and incremental fetches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from .enums import CursorKind

if TYPE_CHECKING:
    from .records import NaturalKey, RawRecord


@dataclass(frozen=True, slots=True)
class Cursor:
    """How far a sync got for one entity stream.

    Exactly one of ``time``/``offset``/``token`` is meaningful, selected by ``kind``.
    A time cursor without ``time`` stands for the beginning of time. ``last_key``
    may accompany any kind and breaks ties between records sharing a timestamp.
    """

    kind: CursorKind
    time: datetime | None = None
    offset: int | None = None
    token: str | None = None
    last_key: NaturalKey | None = None

    def __post_init__(self) -> None:
        match self.kind:
            case CursorKind.TIME:
                if self.offset is not None or self.token is not None:
                    raise ValueError("Time cursors carry neither offset nor token")
                if self.time is not None and self.time.tzinfo is None:
                    raise ValueError("Cursor time must include timezone information")
            case CursorKind.OFFSET:
                if self.time is not None or self.token is not None:
                    raise ValueError("Offset cursors carry neither time nor token")
                if self.offset is None or self.offset < 0:
                    raise ValueError("Offset cursors require a non-negative offset")
            case CursorKind.TOKEN:
                if self.time is not None or self.offset is not None:
                    raise ValueError("Token cursors carry neither time nor offset")
                if not self.token:
                    raise ValueError("Token cursors require a non-empty token")

    @classmethod
    def at_time(cls, time: datetime | None, *, last_key: NaturalKey | None = None) -> Cursor:
        return cls(kind=CursorKind.TIME, time=time, last_key=last_key)

    @classmethod
    def at_offset(cls, offset: int, *, last_key: NaturalKey | None = None) -> Cursor:
        return cls(kind=CursorKind.OFFSET, offset=offset, last_key=last_key)

    @classmethod
    def from_token(cls, token: str, *, last_key: NaturalKey | None = None) -> Cursor:
        return cls(kind=CursorKind.TOKEN, token=token, last_key=last_key)

    @classmethod
    def after_record(cls, record: RawRecord) -> Cursor:
        """Return a time cursor positioned on ``record``."""

        return cls.at_time(record.position, last_key=record.natural_key)

    @property
    def is_origin(self) -> bool:
        """Whether this cursor points at the beginning of time."""

        return self.kind is CursorKind.TIME and self.time is None

    def precedes(self, record: RawRecord) -> bool:
        """Return whether ``record`` lies strictly after this cursor position.

        Only time cursors carry ordering information; offset and token cursors
        admit every record.
        """

        if self.kind is not CursorKind.TIME or self.time is None:
            return True
        position = record.position
        if position is None:
            return True
        if position != self.time:
            return position > self.time
        if self.last_key is None:
            return True
        return _key_order(record.natural_key) > _key_order(self.last_key)

    def to_dict(self) -> dict[str, object]:
        """JSON-safe form, the same shape REST envelopes use for ``next_cursor``."""

        return {
            "kind": self.kind.value,
            "time": self.time.isoformat() if self.time is not None else None,
            "offset": self.offset,
            "token": self.token,
            "last_key": self.last_key,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, object]) -> Cursor:
        raw_time = payload.get("time")
        time: datetime | None = None
        if isinstance(raw_time, str):
            time = datetime.fromisoformat(raw_time)
            if time.tzinfo is None:
                time = time.replace(tzinfo=UTC)
        raw_offset = payload.get("offset")
        raw_token = payload.get("token")
        raw_key = payload.get("last_key")
        return cls(
            kind=CursorKind(str(payload["kind"])),
            time=time,
            offset=int(cast(int, raw_offset)) if raw_offset is not None else None,
            token=str(raw_token) if raw_token is not None else None,
            last_key=raw_key if isinstance(raw_key, (str, int)) else None,
        )


def _key_order(key: NaturalKey) -> tuple[int, int, str]:
    # integers sort numerically and before strings
    if isinstance(key, int):
        return (0, key, "")
    return (1, 0, key)

"""Pydantic models describing the paged JSON envelope served by REST sources.

A page looks like::

    {
        "records": [
            {"id": 42, "created_at": "...", "modified_at": "...", "deleted": false, "fields": {...}}
        ],
        "next_cursor": {"kind": "offset", "offset": 100},
        "has_more": true,
        "total": 1234
    }
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from deltasync.domain.model import CursorKind


def _assume_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RestBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RecordPayload(RestBaseModel):
    id: str | int = Field(validation_alias=AliasChoices("id", "key", "natural_key"))
    created_at: datetime | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt", "create_date")
    )
    modified_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("modified_at", "updated_at", "updatedAt", "write_date"),
    )
    deleted: bool = False
    fields: dict[str, object] = Field(default_factory=dict[str, object])

    _normalize_created = field_validator("created_at", mode="after")(_assume_utc)
    _normalize_modified = field_validator("modified_at", mode="after")(_assume_utc)


class CursorPayload(RestBaseModel):
    kind: CursorKind
    time: datetime | None = None
    offset: int | None = None
    token: str | None = None
    last_key: str | int | None = None

    _normalize_time = field_validator("time", mode="after")(_assume_utc)


class PageEnvelope(RestBaseModel):
    records: list[RecordPayload] = Field(default_factory=list[RecordPayload])
    next_cursor: CursorPayload | None = None
    has_more: bool = False
    total: int | None = None


__all__ = ["CursorPayload", "PageEnvelope", "RecordPayload"]

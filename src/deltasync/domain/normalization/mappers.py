"""Per-entity data mappers turning opaque record fields into event payloads."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from deltasync.domain.model import RawRecord

type DataMapper = Callable[[RawRecord], Mapping[str, object]]


def copy_fields(record: RawRecord) -> Mapping[str, object]:
    return dict(record.fields)


def select_fields(names: Iterable[str]) -> DataMapper:
    """Return a mapper keeping only ``names`` (in that order) when present."""

    selected = tuple(names)

    def mapper(record: RawRecord) -> Mapping[str, object]:
        return {name: record.fields[name] for name in selected if name in record.fields}

    return mapper


def rename_fields(renames: Mapping[str, str], *, keep_unmapped: bool = False) -> DataMapper:
    """Return a mapper translating vendor field names into canonical property names."""

    table = dict(renames)

    def mapper(record: RawRecord) -> Mapping[str, object]:
        data: dict[str, object] = {}
        for name, value in record.fields.items():
            if name in table:
                data[table[name]] = value
            elif keep_unmapped:
                data[name] = value
        return data

    return mapper

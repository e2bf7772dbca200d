"""Vendor-agnostic record envelope returned by source adapters."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

type NaturalKey = str | int


def _empty_fields() -> Mapping[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class RawRecord:
    """One record as returned on a page, before classification and normalization.

    ``fields`` is opaque to the core and handed to the per-entity data mapper
    untouched. Timestamps must be timezone aware when present.
    """

    natural_key: NaturalKey
    created_at: datetime | None = None
    modified_at: datetime | None = None
    fields: Mapping[str, object] = field(default_factory=_empty_fields)
    deleted: bool = False

    def __post_init__(self) -> None:
        for name in ("created_at", "modified_at"):
            value = getattr(self, name)
            if value is not None and value.tzinfo is None:
                raise ValueError(f"RawRecord.{name} must include timezone information")

    @property
    def position(self) -> datetime | None:
        """Timestamp used for cursor ordering: last modification, else creation."""

        return self.modified_at or self.created_at

"""Created/updated/deleted classification for fetched records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

from deltasync.domain.model import Classification

if TYPE_CHECKING:
    from deltasync.domain.model import RawRecord

DEFAULT_CREATION_WINDOW = timedelta(seconds=60)


class Classifier(Protocol):
    def __call__(self, record: RawRecord) -> Classification: ...


def classify(record: RawRecord, window: timedelta = DEFAULT_CREATION_WINDOW) -> Classification:
    """Classify ``record`` from its tombstone flag and timestamps.

    A record counts as created when it was last modified less than ``window``
    after its creation. Records without a creation timestamp are always reported
    as updated; a record that was never modified counts as created.
    """

    if record.deleted:
        return Classification.DELETED
    if record.created_at is None:
        return Classification.UPDATED
    if record.modified_at is None:
        return Classification.CREATED
    if abs(record.modified_at - record.created_at) < window:
        return Classification.CREATED
    return Classification.UPDATED


@dataclass(frozen=True, slots=True)
class WindowClassifier:
    """Default classification policy with a configurable creation window."""

    window: timedelta = DEFAULT_CREATION_WINDOW

    def __post_init__(self) -> None:
        if self.window < timedelta(0):
            raise ValueError("Creation window must be non-negative")

    def __call__(self, record: RawRecord) -> Classification:
        return classify(record, self.window)


__all__ = ["DEFAULT_CREATION_WINDOW", "Classifier", "WindowClassifier", "classify"]

"""Deterministic identifiers for canonical events and relationship targets."""

from __future__ import annotations

import uuid
from datetime import UTC
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime

    from deltasync.domain.model import NaturalKey

EVENT_NAMESPACE: Final[uuid.UUID] = uuid.UUID("0b7c1f3e-5a0d-5c8e-9a51-3f2d4e6b7a10")


def _timestamp_component(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone(UTC).isoformat()


def event_id(
    *,
    source: str,
    entity_type: str,
    natural_key: NaturalKey,
    modified_at: datetime | None,
) -> uuid.UUID:
    """Return the stable id of the event describing one record version."""

    name = "|".join(
        (source, entity_type, str(natural_key), _timestamp_component(modified_at))
    )
    return uuid.uuid5(EVENT_NAMESPACE, name)


def reference_id(source: str, entity_type: str, natural_key: object) -> str:
    """Return the synthetic id used for cross-entity relationship targets."""

    return f"{source}:{entity_type}:{natural_key}"

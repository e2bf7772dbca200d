"""Event normalization: canonical events, deterministic ids, relationship edges."""

from __future__ import annotations

from .identifiers import EVENT_NAMESPACE, event_id, reference_id
from .mappers import DataMapper, copy_fields, rename_fields, select_fields
from .normalizer import EventNormalizer, NormalizationContext

__all__ = [
    "EVENT_NAMESPACE",
    "DataMapper",
    "EventNormalizer",
    "NormalizationContext",
    "copy_fields",
    "event_id",
    "reference_id",
    "rename_fields",
    "select_fields",
]

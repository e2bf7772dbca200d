"""Canonical, vendor-agnostic event representation."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

from .enums import ActorKind, Classification

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(frozen=True, slots=True)
class Actor:
    kind: ActorKind
    id: str | None = None
    name: str | None = None

    @classmethod
    def system(cls) -> Actor:
        return cls(kind=ActorKind.SYSTEM)


@dataclass(frozen=True, slots=True)
class Target:
    id: str
    type: str
    display_name: str | None = None


@dataclass(frozen=True, slots=True)
class Relationship:
    """Typed edge from an event's target to another entity."""

    relation_type: str
    target_id: str
    target_type: str


@dataclass(frozen=True, slots=True)
class EventContext:
    organization_id: str
    source: str
    batch_id: str | None = None
    run_id: str | None = None


_RUN_SCOPED_CONTEXT = frozenset({"batch_id", "run_id"})


def _empty_data() -> Mapping[str, object]:
    return {}


@dataclass(frozen=True, slots=True)
class CanonicalEvent:
    """Normalized output for one extracted change.

    ``id`` is derived from the record identity and modification time, so
    re-delivering the same raw record yields the same id.
    """

    id: UUID
    entity_type: str
    classification: Classification
    timestamp: datetime
    target: Target
    context: EventContext
    actor: Actor | None = None
    data: Mapping[str, object] = field(default_factory=_empty_data)
    relationships: tuple[Relationship, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "id": str(self.id),
            "entity_type": self.entity_type,
            "classification": self.classification.value,
            "timestamp": self.timestamp.isoformat(),
            "actor": (
                {"kind": self.actor.kind.value, "id": self.actor.id, "name": self.actor.name}
                if self.actor is not None
                else None
            ),
            "target": {
                "id": self.target.id,
                "type": self.target.type,
                "display_name": self.target.display_name,
            },
            "context": {
                "organization_id": self.context.organization_id,
                "source": self.context.source,
                "batch_id": self.context.batch_id,
                "run_id": self.context.run_id,
            },
            "data": dict(self.data),
            "relationships": [
                {
                    "relation_type": edge.relation_type,
                    "target_id": edge.target_id,
                    "target_type": edge.target_type,
                }
                for edge in self.relationships
            ],
        }

    def to_json(self) -> str:
        """Serialize with sorted keys so equal events produce identical bytes."""

        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=str)

    def content_hash(self) -> str:
        """Fingerprint of the event content for downstream dedup.

        ``batch_id`` and ``run_id`` are left out so a page re-delivered by a later
        run after a crash hashes the same as its first delivery.
        """

        payload = self.to_dict()
        context = cast("dict[str, object]", payload["context"])
        payload["context"] = {
            key: value for key, value in context.items() if key not in _RUN_SCOPED_CONTEXT
        }
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()

"""Turn classified raw records into canonical events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from deltasync.domain.errors import NormalizationError
from deltasync.domain.model import (
    Actor,
    ActorKind,
    CanonicalEvent,
    EventContext,
    Relationship,
    Target,
)

from .identifiers import event_id, reference_id
from .mappers import DataMapper, copy_fields, select_fields

if TYPE_CHECKING:
    from collections.abc import Mapping

    from deltasync.domain.model import Classification, RawRecord
    from deltasync.domain.registry import EntityTypeRegistry, EntityTypeSpec


@dataclass(frozen=True, slots=True)
class NormalizationContext:
    """Per-run values stamped onto every event."""

    organization_id: str
    batch_id: str | None = None
    run_id: str | None = None


def _is_present(value: object) -> bool:
    # ERP payloads use False for empty relations
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict, set)):
        return bool(value)
    return True


def _first_present(fields: Mapping[str, object], names: tuple[str, ...]) -> object | None:
    for name in names:
        value = fields.get(name)
        if _is_present(value):
            return value
    return None


class EventNormalizer:
    """Map raw records of one vendor onto ``CanonicalEvent`` values.

    Normalization is pure: the same record, classification, entity type and
    context always produce an equal event (and an identical ``to_json()``).
    """

    def __init__(
        self,
        registry: EntityTypeRegistry,
        *,
        mappers: Mapping[str, DataMapper] | None = None,
        include_raw: bool = False,
    ) -> None:
        self.registry = registry
        self._mappers: dict[str, DataMapper] = dict(mappers or {})
        self.include_raw = include_raw

    @property
    def source(self) -> str:
        return self.registry.source

    def register_mapper(self, entity_type: str, mapper: DataMapper) -> None:
        self._mappers[entity_type] = mapper

    def normalize(
        self,
        record: RawRecord,
        classification: Classification,
        entity_type: str,
        context: NormalizationContext,
    ) -> CanonicalEvent:
        timestamp = record.position
        if timestamp is None:
            raise NormalizationError(
                f"{entity_type} record {record.natural_key!r} carries no timestamp",
                natural_key=record.natural_key,
            )

        spec = self.registry.get(entity_type)
        return CanonicalEvent(
            id=event_id(
                source=self.source,
                entity_type=entity_type,
                natural_key=record.natural_key,
                modified_at=timestamp,
            ),
            entity_type=entity_type,
            classification=classification,
            timestamp=timestamp,
            actor=self._actor(spec, record.fields),
            target=self._target(spec, record),
            context=EventContext(
                organization_id=context.organization_id,
                source=self.source,
                batch_id=context.batch_id,
                run_id=context.run_id,
            ),
            data=self._data(spec, record),
            relationships=self.relationships(spec, record.fields),
        )

    def relationships(
        self, spec: EntityTypeSpec, fields: Mapping[str, object]
    ) -> tuple[Relationship, ...]:
        """Build one edge per configured foreign key present in ``fields``."""

        edges: list[Relationship] = []
        for foreign_key in spec.foreign_keys:
            value = fields.get(foreign_key.name)
            if not _is_present(value):
                continue
            edges.append(
                Relationship(
                    relation_type=foreign_key.name,
                    target_id=reference_id(
                        self.source, foreign_key.target_entity or spec.name, value
                    ),
                    target_type=foreign_key.resolved_target_type,
                )
            )
        return tuple(edges)

    @staticmethod
    def _actor(spec: EntityTypeSpec, fields: Mapping[str, object]) -> Actor:
        user_id = _first_present(fields, spec.actor_fields)
        if user_id is not None:
            name = _first_present(fields, spec.actor_name_fields)
            return Actor(
                kind=ActorKind.USER,
                id=str(user_id),
                name=str(name) if name is not None else None,
            )
        service_id = _first_present(fields, spec.service_actor_fields)
        if service_id is not None:
            return Actor(kind=ActorKind.SERVICE, id=str(service_id))
        return Actor.system()

    @staticmethod
    def _target(spec: EntityTypeSpec, record: RawRecord) -> Target:
        display = _first_present(record.fields, spec.display_fields)
        return Target(
            id=str(record.natural_key),
            type=spec.resolved_target_type,
            display_name=str(display) if display is not None else None,
        )

    def _data(self, spec: EntityTypeSpec, record: RawRecord) -> dict[str, object]:
        mapper = self._mappers.get(spec.name)
        if mapper is None:
            mapper = select_fields(spec.data_fields) if spec.data_fields else copy_fields
        data = dict(mapper(record))
        if self.include_raw:
            data["_raw"] = dict(record.fields)
        return data

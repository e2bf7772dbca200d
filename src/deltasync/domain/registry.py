"""Static per-vendor entity-type table supplied as configuration.

The registry tells the normalizer which label to use for an entity's target,
which fields reference other entities, where to look for the acting user and
which page size the vendor tolerates. It is usually loaded from a TOML file::

    source = "odoo"

    [entities."res.partner"]
    target_type = "contact"
    page_size = 200
    foreign_keys = ["parent_id", { name = "user_id", target_entity = "res.users" }]
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from typing import TYPE_CHECKING, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from deltasync.domain.errors import RegistryError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_ACTOR_FIELDS: tuple[str, ...] = (
    "owner_id",
    "ownerId",
    "user_id",
    "userId",
    "hubspot_owner_id",
    "OwnerId",
    "created_by",
    "createdBy",
)
DEFAULT_ACTOR_NAME_FIELDS: tuple[str, ...] = (
    "owner_name",
    "ownerName",
    "user_name",
    "userName",
    "created_by_name",
)
DEFAULT_SERVICE_ACTOR_FIELDS: tuple[str, ...] = ("bot_id", "botId", "integration_id")
DEFAULT_DISPLAY_FIELDS: tuple[str, ...] = (
    "display_name",
    "displayName",
    "name",
    "Name",
    "title",
    "subject",
    "CardName",
    "DocNum",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_REFERENCE_SUFFIXES = ("_ids", "_id", "_number", "_no", "_code", "_key", "_ref")


def infer_target_type(field_name: str) -> str:
    """Derive a target type label from a foreign-key field name.

    ``parentId`` becomes ``parent``, ``account_number`` becomes ``account`` and
    ``costCenter`` becomes ``cost_center``.
    """

    snake = _CAMEL_BOUNDARY.sub("_", field_name).lower()
    for suffix in _REFERENCE_SUFFIXES:
        if snake.endswith(suffix) and len(snake) > len(suffix):
            return snake[: -len(suffix)]
    return snake


class RegistryBaseModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ForeignKeySpec(RegistryBaseModel):
    name: str = Field(min_length=1)
    target_type: str | None = None
    target_entity: str | None = None

    @property
    def resolved_target_type(self) -> str:
        return self.target_type or infer_target_type(self.name)


class EntityTypeSpec(RegistryBaseModel):
    name: str = Field(min_length=1)
    target_type: str | None = None
    page_size: int | None = Field(default=None, gt=0)
    foreign_keys: tuple[ForeignKeySpec, ...] = ()
    actor_fields: tuple[str, ...] = DEFAULT_ACTOR_FIELDS
    actor_name_fields: tuple[str, ...] = DEFAULT_ACTOR_NAME_FIELDS
    service_actor_fields: tuple[str, ...] = DEFAULT_SERVICE_ACTOR_FIELDS
    display_fields: tuple[str, ...] = DEFAULT_DISPLAY_FIELDS
    data_fields: tuple[str, ...] | None = None

    @field_validator("foreign_keys", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            items = cast("list[object] | tuple[object, ...]", value)
            return tuple({"name": item} if isinstance(item, str) else item for item in items)
        return value

    @property
    def resolved_target_type(self) -> str:
        return self.target_type or self.name


class EntityTypeRegistry(RegistryBaseModel):
    source: str = Field(min_length=1)
    entities: dict[str, EntityTypeSpec] = Field(default_factory=dict[str, EntityTypeSpec])

    @model_validator(mode="before")
    @classmethod
    def _name_entities_by_key(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return value
        data = dict(cast("Mapping[str, object]", value))
        entities = data.get("entities")
        if isinstance(entities, Mapping):
            named: dict[str, object] = {}
            for key, spec in cast("Mapping[str, object]", entities).items():
                if isinstance(spec, Mapping):
                    spec_data = dict(cast("Mapping[str, object]", spec))
                    spec_data.setdefault("name", key)
                    named[key] = spec_data
                else:
                    named[key] = spec
            data["entities"] = named
        return data

    @model_validator(mode="after")
    def _check_names(self) -> EntityTypeRegistry:
        for key, spec in self.entities.items():
            if spec.name != key:
                raise ValueError(f"Entity {key!r} declares mismatching name {spec.name!r}")
        return self

    @property
    def entity_types(self) -> tuple[str, ...]:
        return tuple(self.entities)

    def get(self, entity_type: str) -> EntityTypeSpec:
        """Return the spec for ``entity_type``; unknown types get defaults."""

        spec = self.entities.get(entity_type)
        if spec is None:
            return EntityTypeSpec(name=entity_type)
        return spec

    def target_type_for(self, entity_type: str) -> str:
        return self.get(entity_type).resolved_target_type

    def page_size_for(self, entity_type: str, default: int) -> int:
        return self.get(entity_type).page_size or default

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> EntityTypeRegistry:
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise RegistryError(f"Invalid entity registry: {exc}") from exc

    @classmethod
    def from_toml(cls, path: Path) -> EntityTypeRegistry:
        try:
            with path.open("rb") as handle:
                document = tomllib.load(handle)
        except FileNotFoundError as exc:
            raise RegistryError(f"Entity registry not found: {path}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise RegistryError(f"Entity registry {path} is not valid TOML: {exc}") from exc
        return cls.from_mapping(document)


__all__ = [
    "EntityTypeRegistry",
    "EntityTypeSpec",
    "ForeignKeySpec",
    "infer_target_type",
]

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from deltasync.domain.errors import RegistryError
from deltasync.domain.registry import EntityTypeRegistry, EntityTypeSpec, infer_target_type

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("field_name", "expected"),
    [
        ("parent_id", "parent"),
        ("parentId", "parent"),
        ("account_number", "account"),
        ("costCenter", "cost_center"),
        ("tag_ids", "tag"),
        ("CardCode", "card"),
        ("_id", "_id"),
    ],
)
def test_infer_target_type(field_name: str, expected: str) -> None:
    assert infer_target_type(field_name) == expected


def test_registry_names_entities_after_their_keys(registry: EntityTypeRegistry) -> None:
    partner = registry.get("res.partner")

    assert partner.name == "res.partner"
    assert partner.resolved_target_type == "contact"
    assert [fk.name for fk in partner.foreign_keys] == ["parent_id", "user_id"]
    assert partner.foreign_keys[0].resolved_target_type == "parent"
    assert partner.foreign_keys[1].resolved_target_type == "user"
    assert registry.entity_types == ("res.partner", "sale.order")


def test_unknown_entities_get_defaults(registry: EntityTypeRegistry) -> None:
    spec = registry.get("crm.lead")

    assert spec == EntityTypeSpec(name="crm.lead")
    assert registry.target_type_for("crm.lead") == "crm.lead"
    assert registry.page_size_for("crm.lead", 100) == 100
    assert registry.page_size_for("sale.order", 100) == 2


def test_invalid_registry_raises_registry_error() -> None:
    with pytest.raises(RegistryError, match="Invalid entity registry"):
        EntityTypeRegistry.from_mapping({"source": "odoo", "entities": {"x": {"page_size": 0}}})
    with pytest.raises(RegistryError):
        EntityTypeRegistry.from_mapping({"source": "odoo", "unexpected": True})
    with pytest.raises(RegistryError):
        EntityTypeRegistry.from_mapping(
            {"source": "odoo", "entities": {"a": {"name": "b"}}}
        )


def test_registry_loads_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "registry.toml"
    path.write_text(
        'source = "hubspot"\n'
        "\n"
        '[entities.deals]\n'
        'target_type = "deal"\n'
        "page_size = 50\n"
        'foreign_keys = ["associatedCompanyId", '
        '{ name = "hubspot_owner_id", target_type = "user", target_entity = "owners" }]\n'
    )

    loaded = EntityTypeRegistry.from_toml(path)

    assert loaded.source == "hubspot"
    deals = loaded.get("deals")
    assert deals.page_size == 50
    assert deals.foreign_keys[0].resolved_target_type == "associated_company"
    assert deals.foreign_keys[1].target_entity == "owners"


def test_registry_file_errors(tmp_path: Path) -> None:
    with pytest.raises(RegistryError, match="not found"):
        EntityTypeRegistry.from_toml(tmp_path / "missing.toml")

    broken = tmp_path / "broken.toml"
    broken.write_text("source = ")
    with pytest.raises(RegistryError, match="not valid TOML"):
        EntityTypeRegistry.from_toml(broken)

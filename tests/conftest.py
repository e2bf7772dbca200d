from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from deltasync.adapters.sqlalchemy import SqlAlchemyCheckpointStore, build_checkpoint_store
from deltasync.domain.registry import EntityTypeRegistry

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _isolated_data_dir(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("DELTASYNC_DATA_DIR", str(tmp_path_factory.mktemp("deltasync-data")))
    monkeypatch.delenv("DELTASYNC_DATABASE_URI", raising=False)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_checkpoint_store(sqlite_engine: Engine) -> SqlAlchemyCheckpointStore:
    return build_checkpoint_store(engine=sqlite_engine)


@pytest.fixture
def registry() -> EntityTypeRegistry:
    return EntityTypeRegistry.from_mapping(
        {
            "source": "odoo",
            "entities": {
                "res.partner": {
                    "target_type": "contact",
                    "foreign_keys": [
                        "parent_id",
                        {"name": "user_id", "target_type": "user", "target_entity": "res.users"},
                    ],
                },
                "sale.order": {
                    "target_type": "order",
                    "page_size": 2,
                    "foreign_keys": [
                        {"name": "partner_id", "target_entity": "res.partner"},
                    ],
                },
            },
        }
    )

"""SQLAlchemy table metadata for persisted sync checkpoints."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

from deltasync.domain.model import CheckpointStatus, CursorKind

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        # sqlite drops the offset on the way back
        return value if value.tzinfo else value.replace(tzinfo=UTC)


sync_checkpoint_table = Table(
    "sync_checkpoint",
    metadata,
    Column("organization_id", String(255), primary_key=True),
    Column("entity_type", String(255), primary_key=True),
    Column("cursor_kind", Enum(CursorKind, native_enum=False), nullable=False),
    Column("cursor_time", UTCDateTime(), nullable=True),
    Column("cursor_offset", Integer, nullable=True),
    Column("cursor_token", Text, nullable=True),
    # str or int natural key; JSON keeps the type
    Column("cursor_last_key", JSON, nullable=True),
    Column("record_count", Integer, nullable=False, default=0),
    Column("status", Enum(CheckpointStatus, native_enum=False), nullable=False),
    Column("last_error", Text, nullable=True),
    Column("updated_at", UTCDateTime(), nullable=False),
)


def create_checkpoint_tables(engine: Engine) -> None:
    log.debug("Creating checkpoint tables on %s", engine.url)
    metadata.create_all(engine)


__all__ = ["UTCDateTime", "create_checkpoint_tables", "metadata", "sync_checkpoint_table"]

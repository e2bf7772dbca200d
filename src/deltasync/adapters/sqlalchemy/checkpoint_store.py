"""SQLAlchemy-backed checkpoint store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, insert, select
from sqlalchemy.orm import Session, sessionmaker

from deltasync.config.storage import get_storage_config
from deltasync.domain.model import Cursor, SyncCheckpoint

from .mappings import create_checkpoint_tables, sync_checkpoint_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine, RowMapping

    from deltasync.domain.ports import CheckpointStore

log = getLogger(__name__)

_table = sync_checkpoint_table


def _to_row(checkpoint: SyncCheckpoint) -> dict[str, object]:
    cursor = checkpoint.cursor
    return {
        "organization_id": checkpoint.organization_id,
        "entity_type": checkpoint.entity_type,
        "cursor_kind": cursor.kind,
        "cursor_time": cursor.time,
        "cursor_offset": cursor.offset,
        "cursor_token": cursor.token,
        "cursor_last_key": cursor.last_key,
        "record_count": checkpoint.record_count,
        "status": checkpoint.status,
        "last_error": checkpoint.last_error,
        "updated_at": checkpoint.updated_at,
    }


def _from_row(row: RowMapping) -> SyncCheckpoint:
    return SyncCheckpoint(
        organization_id=row["organization_id"],
        entity_type=row["entity_type"],
        cursor=Cursor(
            kind=row["cursor_kind"],
            time=row["cursor_time"],
            offset=row["cursor_offset"],
            token=row["cursor_token"],
            last_key=row["cursor_last_key"],
        ),
        record_count=row["record_count"],
        status=row["status"],
        last_error=row["last_error"],
        updated_at=row["updated_at"],
    )


class SqlAlchemyCheckpointStore:
    """Persist checkpoints in the ``sync_checkpoint`` table.

    Each ``save`` runs in its own transaction and replaces the row for the key,
    so a crash never leaves a half-written checkpoint behind.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def load(self, organization_id: str, entity_type: str) -> SyncCheckpoint | None:
        stmt = select(_table).where(
            _table.c.organization_id == organization_id,
            _table.c.entity_type == entity_type,
        )
        with self._session_factory() as session:
            row = session.execute(stmt).mappings().one_or_none()
        return _from_row(row) if row is not None else None

    def save(self, checkpoint: SyncCheckpoint) -> None:
        with self._session_factory.begin() as session:
            session.execute(
                delete(_table).where(
                    _table.c.organization_id == checkpoint.organization_id,
                    _table.c.entity_type == checkpoint.entity_type,
                )
            )
            session.execute(insert(_table).values(**_to_row(checkpoint)))
        log.debug(
            "Saved checkpoint %s/%s at %s (%s)",
            checkpoint.organization_id,
            checkpoint.entity_type,
            checkpoint.cursor,
            checkpoint.status,
        )

    def clear(self, organization_id: str, entity_type: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(
                delete(_table).where(
                    _table.c.organization_id == organization_id,
                    _table.c.entity_type == entity_type,
                )
            )

    def list_checkpoints(self, organization_id: str) -> list[SyncCheckpoint]:
        stmt = (
            select(_table)
            .where(_table.c.organization_id == organization_id)
            .order_by(_table.c.entity_type)
        )
        with self._session_factory() as session:
            rows = session.execute(stmt).mappings().all()
        return [_from_row(row) for row in rows]


def build_checkpoint_store(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
) -> SqlAlchemyCheckpointStore:
    """Create the checkpoint tables if needed and return a store bound to them."""

    if engine is None:
        uri = database_uri or get_storage_config().checkpoint_database_uri()
        engine = create_engine(uri, future=True)
    create_checkpoint_tables(engine)
    return SqlAlchemyCheckpointStore(sessionmaker(bind=engine, expire_on_commit=False))


if TYPE_CHECKING:
    _store_check: CheckpointStore = SqlAlchemyCheckpointStore(sessionmaker())

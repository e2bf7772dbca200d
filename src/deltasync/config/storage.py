"""Where deltasync keeps its checkpoint database and HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATA_DIR_ENV: Final[str] = "DELTASYNC_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DELTASYNC_DATABASE_URI"
CHECKPOINT_DB_FILENAME: Final[str] = "checkpoints.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


def _platform_data_home() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else Path.home() / "AppData" / "Local"
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else Path.home() / ".local" / "share"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Resolved storage locations.

    ``database_uri`` replaces the sqlite file under ``data_dir`` so several
    workers syncing the same organization can share one checkpoint database.
    """

    data_dir: Path
    database_uri: str | None = None

    def directory(self) -> Path:
        directory = self.data_dir.expanduser().resolve()
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def checkpoint_database_uri(self) -> str:
        if self.database_uri:
            return self.database_uri
        return f"sqlite+pysqlite:///{self.directory() / CHECKPOINT_DB_FILENAME}"

    def http_cache_path(self) -> Path:
        return self.directory() / HTTP_CACHE_FILENAME


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv(DATA_DIR_ENV)
    data_dir = Path(env_dir) if env_dir else _platform_data_home() / "deltasync"
    return StorageConfig(data_dir=data_dir, database_uri=os.getenv(DATABASE_URI_ENV) or None)

"""Synchronization defaults for orchestrator and scheduler runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import optional_int_env
from .errors import ConfigurationError

DEFAULT_PAGE_SIZE = 100
DEFAULT_LOOKBACK_DAYS = 180
DEFAULT_CREATION_WINDOW_SECONDS = 60
DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True, slots=True)
class SyncConfig:
    page_size: int = DEFAULT_PAGE_SIZE
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    creation_window_seconds: int = DEFAULT_CREATION_WINDOW_SECONDS
    max_workers: int = DEFAULT_MAX_WORKERS
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ConfigurationError("page_size must be positive")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be positive")

    @property
    def lookback(self) -> timedelta | None:
        """Lookback horizon; ``None`` means syncing from the beginning of time."""

        if self.lookback_days == 0:
            return None
        return timedelta(days=self.lookback_days)

    @property
    def creation_window(self) -> timedelta:
        return timedelta(seconds=self.creation_window_seconds)


def get_sync_config() -> SyncConfig:
    page_size = optional_int_env("DELTASYNC_PAGE_SIZE", minimum=1)
    lookback_days = optional_int_env("DELTASYNC_LOOKBACK_DAYS")
    window = optional_int_env("DELTASYNC_CREATION_WINDOW_SECONDS")
    max_workers = optional_int_env("DELTASYNC_MAX_WORKERS", minimum=1)
    max_pages = optional_int_env("DELTASYNC_MAX_PAGES", minimum=1)
    return SyncConfig(
        page_size=DEFAULT_PAGE_SIZE if page_size is None else page_size,
        lookback_days=DEFAULT_LOOKBACK_DAYS if lookback_days is None else lookback_days,
        creation_window_seconds=DEFAULT_CREATION_WINDOW_SECONDS if window is None else window,
        max_workers=DEFAULT_MAX_WORKERS if max_workers is None else max_workers,
        max_pages=max_pages,
    )

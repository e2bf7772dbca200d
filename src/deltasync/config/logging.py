"""Logging setup for the CLI and for worker processes running syncs."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError

LOG_LEVEL_ENV = "DELTASYNC_LOG_LEVEL"
# httpx logs every request at INFO, which drowns page progress on long syncs
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "hishel")


def _level_from_env(default: int) -> int:
    raw = os.getenv(LOG_LEVEL_ENV)
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelNamesMapping().get(raw.strip().upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_ENV} is not a logging level: {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once.

    ``level`` defaults to ``DELTASYNC_LOG_LEVEL`` or INFO. The thread name is part
    of the format so interleaved entity workers stay readable. HTTP client loggers
    are held at WARNING unless debugging.
    """

    effective = level if level is not None else _level_from_env(logging.INFO)
    logging.basicConfig(
        level=effective,
        format="%(asctime)s %(levelname)s [%(name)s] %(threadName)s %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    noisy_level = effective if effective <= logging.DEBUG else max(effective, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

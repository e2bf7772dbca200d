"""Connection settings for one vendor page source, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .env import optional_int_env, require_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "deltasync"


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Holds the settings needed to build an HTTP page source for ``name``."""

    name: str
    resilience: ResilienceConfig


def _env_prefix(name: str) -> str:
    return "DELTASYNC_" + "".join(ch if ch.isalnum() else "_" for ch in name).upper()


def get_source_config(name: str, *, base_url: str | None = None) -> SourceConfig:
    """Load ``DELTASYNC_<NAME>_*`` variables into a source configuration.

    ``BASE_URL`` is required unless passed explicitly. ``API_TOKEN`` becomes a
    bearer ``Authorization`` header. ``RATE_LIMIT`` is calls per second,
    ``RETRIES`` the in-call retry budget and ``TIMEOUT_SECONDS`` the request timeout.
    """

    prefix = _env_prefix(name)
    url = base_url or require_env_var(f"{prefix}_BASE_URL")
    rate = optional_int_env(f"{prefix}_RATE_LIMIT", minimum=1)
    retries = optional_int_env(f"{prefix}_RETRIES")
    timeout = optional_int_env(f"{prefix}_TIMEOUT_SECONDS", minimum=1)

    headers = {"User-Agent": os.getenv(f"{prefix}_USER_AGENT") or DEFAULT_USER_AGENT}
    token = os.getenv(f"{prefix}_API_TOKEN")
    if token and token.strip():
        headers["Authorization"] = f"Bearer {token.strip()}"

    resilience = ResilienceConfig(
        name=name,
        base_url=url,
        timeout_seconds=DEFAULT_TIMEOUT_SECONDS if timeout is None else float(timeout),
        retry=RetryPolicy() if retries is None else RetryPolicy(total=retries),
        ratelimit=None if rate is None else RateLimit(max_calls=rate),
        default_headers=headers,
    )
    return SourceConfig(name=name, resilience=resilience)

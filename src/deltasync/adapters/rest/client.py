"""Source adapter for vendors exposing a paged JSON endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from deltasync.adapters.http_resilience import ResilientClient
from deltasync.domain.errors import CursorExpiredError, FatalSourceError, TransientSourceError
from deltasync.domain.model import CursorKind

from .translator import parse_page

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from deltasync.config.http_resilience import ResilienceConfig
    from deltasync.domain.model import Cursor
    from deltasync.domain.ports import PageResult

log = getLogger(__name__)

type QueryParams = Mapping[str, str | int]
type RequestBuilder = Callable[[Cursor, int], QueryParams]
type PageParser = Callable[[object, Cursor], PageResult]
type ExpiryDetector = Callable[[httpx.Response], bool]

_AUTH_STATUSES = frozenset({401, 403})
_TRANSIENT_STATUSES = frozenset({408, 429})


def cursor_params(cursor: Cursor, page_size: int) -> dict[str, str | int]:
    """Default query mapping: ``limit`` plus one of ``since``/``offset``/``cursor``."""

    params: dict[str, str | int] = {"limit": page_size}
    match cursor.kind:
        case CursorKind.TIME:
            if cursor.time is not None:
                params["since"] = cursor.time.isoformat()
        case CursorKind.OFFSET:
            params["offset"] = cursor.offset or 0
        case CursorKind.TOKEN:
            params["cursor"] = cursor.token or ""
    if cursor.last_key is not None:
        params["after_key"] = cursor.last_key
    return params


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpPageSource:
    """Fetch one page per call from ``path`` relative to the configured base URL.

    HTTP outcomes map onto the source error taxonomy: expired cursors (HTTP 410
    by default, or whatever ``expiry_detector`` recognises) raise
    ``CursorExpiredError``; 408, 429, 5xx and transport errors left over after
    the client's own retries raise ``TransientSourceError``; authentication
    failures, other 4xx and unparsable payloads raise ``FatalSourceError``.
    """

    resilience: ResilienceConfig
    path: str = ""
    request_builder: RequestBuilder = field(default=cursor_params)
    page_parser: PageParser = field(default=parse_page)
    expired_statuses: frozenset[int] = field(default_factory=lambda: frozenset({410}))
    expiry_detector: ExpiryDetector | None = None
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def fetch_page(self, cursor: Cursor, page_size: int) -> PageResult:
        return asyncio.run(self._fetch_page_async(cursor, page_size))

    async def _fetch_page_async(self, cursor: Cursor, page_size: int) -> PageResult:
        params = self.request_builder(cursor, page_size)
        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.request("GET", self.path, params=params)
        except httpx.TransportError as exc:
            raise TransientSourceError(f"{self.resilience.name}: {exc}") from exc

        self._raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise FatalSourceError(
                f"{self.resilience.name} returned a non-JSON page",
                status_code=response.status_code,
            ) from exc
        try:
            return self.page_parser(payload, cursor)
        except (KeyError, TypeError, ValueError) as exc:
            log.error(f"{self.resilience.name} page could not be parsed: {exc}")
            raise FatalSourceError(
                f"{self.resilience.name} returned an unexpected page payload",
                status_code=response.status_code,
            ) from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        name = self.resilience.name
        if status in self.expired_statuses or (
            self.expiry_detector is not None and self.expiry_detector(response)
        ):
            raise CursorExpiredError(f"{name} rejected the sync cursor", status_code=status)
        if status < 400:
            return
        if status in _AUTH_STATUSES:
            raise FatalSourceError(
                f"{name} refused credentials (HTTP {status})", status_code=status
            )
        if status in _TRANSIENT_STATUSES or status >= 500:
            raise TransientSourceError(f"{name} unavailable (HTTP {status})", status_code=status)
        raise FatalSourceError(f"{name} rejected the request (HTTP {status})", status_code=status)


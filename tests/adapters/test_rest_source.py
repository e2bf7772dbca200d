from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from datetime import UTC, datetime

import httpx
import pytest

from deltasync.adapters.http_resilience import ResilientClient
from deltasync.adapters.rest import HttpPageSource, cursor_params, parse_page
from deltasync.config import ResilienceConfig, RetryPolicy
from deltasync.domain.errors import CursorExpiredError, FatalSourceError, TransientSourceError
from deltasync.domain.model import Cursor

RESILIENCE = ResilienceConfig(
    name="crm",
    base_url="https://crm.test/api/",
    retry=RetryPolicy(total=0),
)


def _source(
    handler: Callable[[httpx.Request], httpx.Response],
    **overrides: object,
) -> tuple[HttpPageSource, list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, transport=httpx.MockTransport(recording_handler))

    source = HttpPageSource(
        resilience=RESILIENCE,
        path="partners",
        client_factory=factory,
        **overrides,  # type: ignore[arg-type]
    )
    return source, requests


def _envelope(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "records": [
            {
                "id": 1,
                "created_at": "2024-05-01T08:00:00Z",
                "modified_at": "2024-05-01T08:00:30Z",
                "fields": {"name": "Acme"},
            },
            {
                "id": 2,
                "created_at": "2024-04-01T08:00:00Z",
                "updated_at": "2024-05-02T09:00:00",
                "deleted": True,
            },
        ],
        "next_cursor": {"kind": "offset", "offset": 2},
        "has_more": True,
        "total": 5,
    }
    payload.update(overrides)
    return payload


def test_fetch_page_sends_cursor_and_parses_records() -> None:
    source, requests = _source(lambda request: httpx.Response(200, json=_envelope()))

    page = source.fetch_page(Cursor.at_offset(0), 2)

    (request,) = requests
    assert request.url.path == "/api/partners"
    assert request.url.params["limit"] == "2"
    assert request.url.params["offset"] == "0"
    assert [record.natural_key for record in page.records] == [1, 2]
    first, second = page.records
    assert first.fields == {"name": "Acme"}
    assert first.modified_at == datetime(2024, 5, 1, 8, 0, 30, tzinfo=UTC)
    assert second.deleted is True
    assert second.modified_at == datetime(2024, 5, 2, 9, 0, tzinfo=UTC)
    assert page.next_cursor == Cursor.at_offset(2)
    assert page.has_more is True
    assert page.total == 5


@pytest.mark.parametrize(
    ("status", "error"),
    [
        (410, CursorExpiredError),
        (401, FatalSourceError),
        (403, FatalSourceError),
        (404, FatalSourceError),
        (408, TransientSourceError),
        (429, TransientSourceError),
        (500, TransientSourceError),
        (503, TransientSourceError),
    ],
)
def test_http_status_maps_onto_source_errors(status: int, error: type[Exception]) -> None:
    source, _ = _source(lambda request: httpx.Response(status, json={"error": "nope"}))

    with pytest.raises(error) as exc:
        source.fetch_page(Cursor.from_token("delta-1"), 50)

    assert exc.value.status_code == status  # type: ignore[attr-defined]


def test_expiry_detector_recognises_vendor_specific_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"code": "SYNC_TOKEN_EXPIRED"}})

    def expired(response: httpx.Response) -> bool:
        return "SYNC_TOKEN_EXPIRED" in response.text

    source, _ = _source(handler, expiry_detector=expired)

    with pytest.raises(CursorExpiredError):
        source.fetch_page(Cursor.from_token("delta-1"), 50)


def test_transport_errors_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source, _ = _source(handler)

    with pytest.raises(TransientSourceError) as exc:
        source.fetch_page(Cursor.at_offset(0), 10)

    assert isinstance(exc.value.__cause__, httpx.ConnectError)


def test_unparsable_payloads_are_fatal() -> None:
    not_json, _ = _source(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
    wrong_shape, _ = _source(lambda request: httpx.Response(200, json={"records": "nope"}))

    with pytest.raises(FatalSourceError, match="non-JSON"):
        not_json.fetch_page(Cursor.at_offset(0), 10)
    with pytest.raises(FatalSourceError, match="unexpected page payload"):
        wrong_shape.fetch_page(Cursor.at_offset(0), 10)


def test_custom_request_builder_and_parser() -> None:
    def builder(cursor: Cursor, page_size: int) -> dict[str, str | int]:
        return {"$top": page_size, "$skip": cursor.offset or 0}

    def parser(payload: object, cursor: Cursor) -> object:
        assert payload == {"value": []}
        return parse_page({"records": [], "has_more": False}, cursor)

    source, requests = _source(
        lambda request: httpx.Response(200, json={"value": []}),
        request_builder=builder,
        page_parser=parser,
    )

    page = source.fetch_page(Cursor.at_offset(40), 20)

    assert requests[0].url.params["$top"] == "20"
    assert requests[0].url.params["$skip"] == "40"
    assert page.records == ()
    assert page.has_more is False


def test_cursor_params_per_cursor_kind() -> None:
    since = datetime(2024, 5, 1, tzinfo=UTC)

    assert cursor_params(Cursor.at_time(since, last_key=9), 100) == {
        "limit": 100,
        "since": since.isoformat(),
        "after_key": 9,
    }
    assert cursor_params(Cursor.at_time(None), 10) == {"limit": 10}
    assert cursor_params(Cursor.at_offset(30), 10) == {"limit": 10, "offset": 30}
    assert cursor_params(Cursor.from_token("abc"), 10) == {"limit": 10, "cursor": "abc"}


def test_parse_page_derives_missing_next_cursor() -> None:
    payload = _envelope(next_cursor=None)

    from_offset = parse_page(payload, Cursor.at_offset(10))
    from_time = parse_page(payload, Cursor.at_time(None))
    empty = parse_page({"records": [], "has_more": False}, Cursor.at_time(None))

    assert from_offset.next_cursor == Cursor.at_offset(12)
    assert from_time.next_cursor == Cursor.at_time(
        datetime(2024, 5, 2, 9, 0, tzinfo=UTC), last_key=2
    )
    assert empty.next_cursor == Cursor.at_time(None)


def test_parse_page_reads_envelope_cursor_in_cursor_dict_shape() -> None:
    expected = Cursor.at_time(datetime(2024, 5, 2, 9, 0, tzinfo=UTC), last_key="SO-2")

    page = parse_page(
        _envelope(next_cursor={"kind": "time", "time": "2024-05-02T09:00:00", "last_key": "SO-2"}),
        Cursor.at_time(None),
    )
    echoed = parse_page(_envelope(next_cursor=expected.to_dict()), Cursor.at_time(None))

    assert page.next_cursor == expected
    assert echoed.next_cursor == expected


def test_parse_page_drops_records_already_covered_by_time_cursor() -> None:
    boundary = datetime(2024, 5, 2, 9, 0, tzinfo=UTC)

    page = parse_page(_envelope(next_cursor=None), Cursor.at_time(boundary, last_key=1))

    assert [record.natural_key for record in page.records] == [2]
    assert page.next_cursor == Cursor.at_time(boundary, last_key=2)


def test_parse_page_of_only_boundary_records_keeps_cursor() -> None:
    cursor = Cursor.at_time(datetime(2024, 5, 2, 9, 0, tzinfo=UTC), last_key=2)

    page = parse_page(_envelope(next_cursor=None), cursor)

    assert page.records == ()
    assert page.has_more
    assert page.next_cursor == cursor


def test_parse_page_requires_next_token_while_paging() -> None:
    with pytest.raises(ValueError, match="next_cursor"):
        parse_page({"records": [], "has_more": True}, Cursor.from_token("t-1"))

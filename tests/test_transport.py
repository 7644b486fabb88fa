import asyncio
import json

import httpx
import pytest

from tracker_client.core.errors import HTTPError, NetworkFailure
from tracker_client.services.transport import TransportGateway


def _send(settings, handler, *args, **kwargs):
    async def go():
        async with TransportGateway(settings, transport=httpx.MockTransport(handler)) as gateway:
            return await gateway.send(*args, **kwargs)

    return asyncio.run(go())


def test_get_sends_key_and_accept_but_no_content_type(settings, recorder):
    recorder.add("GET", "/api/v1/tickets", payload=[])

    raw = _send(settings, recorder, "GET", "/api/v1/tickets", operation="tickets.list")

    request = recorder.last
    assert raw.status == 200
    assert request.url == httpx.URL("http://tracker.test/api/v1/tickets")
    assert request.headers["X-API-Key"] == "test-secret"
    assert request.headers["Accept"] == "application/json"
    assert "Content-Type" not in request.headers


def test_body_is_json_with_explicit_nulls(settings, recorder):
    recorder.add("PATCH", "/api/v1/tickets/3", payload={"ok": True})

    _send(
        settings,
        recorder,
        "PATCH",
        "/api/v1/tickets/3",
        body={"invoice_number": None, "completed": 1},
        operation="tickets.update",
    )

    assert recorder.last.headers["Content-Type"] == "application/json"
    assert recorder.last_json() == {"invoice_number": None, "completed": 1}


def test_query_drops_none_values(settings, recorder):
    recorder.add("GET", "/api/v1/hardware", payload=[])

    _send(settings, recorder, "GET", "/api/v1/hardware", {"limit": 5, "offset": 0, "q": None}, operation="hardware.list")

    assert dict(recorder.last.url.params) == {"limit": "5", "offset": "0"}


def test_missing_api_key_sends_no_header(make_tracker, recorder):
    recorder.add("GET", "/api/v1/tickets", payload=[])
    tracker = make_tracker(API_KEY="")

    async def go():
        async with tracker:
            return await tracker.tickets.list_tickets()

    assert asyncio.run(go()) == []
    assert "X-API-Key" not in recorder.last.headers


def test_success_bytes_pass_through_untouched(settings, recorder):
    body = b'{"weird":   "spacing"}'
    recorder.add("GET", "/api/v1/clients", content=body)

    raw = _send(settings, recorder, "GET", "/api/v1/clients", operation="clients.list")

    assert raw.content == body


def test_error_detail_is_parsed(settings, recorder):
    recorder.add("DELETE", "/api/v1/tickets/9", status=404, payload={"detail": "Not found"})

    with pytest.raises(HTTPError) as excinfo:
        _send(settings, recorder, "DELETE", "/api/v1/tickets/9", operation="tickets.delete")

    assert excinfo.value.status == 404
    assert excinfo.value.detail == "Not found"
    assert str(excinfo.value) == "tickets.delete failed: HTTP 404: Not found"


def test_error_envelope_message_is_used(settings, recorder):
    recorder.add(
        "POST",
        "/api/v1/tickets",
        status=422,
        payload={"code": "validation_error", "message": "Validation failed", "details": {"errors": []}},
    )

    with pytest.raises(HTTPError) as excinfo:
        _send(settings, recorder, "POST", "/api/v1/tickets", body={}, operation="tickets.create")

    assert excinfo.value.detail == "Validation failed"


@pytest.mark.parametrize(
    "content",
    [b"<html>Bad Gateway</html>", b"", json.dumps({"detail": [{"loc": ["body"]}]}).encode(), b"[]"],
)
def test_unparseable_error_body_keeps_only_status(settings, recorder, content):
    recorder.add("GET", "/api/v1/tickets", status=502, content=content)

    with pytest.raises(HTTPError) as excinfo:
        _send(settings, recorder, "GET", "/api/v1/tickets", operation="tickets.list")

    assert excinfo.value.status == 502
    assert excinfo.value.detail is None
    assert str(excinfo.value) == "tickets.list failed: HTTP 502"


def test_connection_errors_become_network_failures(settings):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure) as excinfo:
        _send(settings, handler, "GET", "/api/v1/tickets", operation="tickets.list")

    assert excinfo.value.timed_out is False
    assert "tickets.list" in str(excinfo.value)


def test_timeouts_are_flagged(settings):
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(NetworkFailure) as excinfo:
        _send(settings, handler, "GET", "/api/v1/tickets", operation="tickets.list")

    assert excinfo.value.timed_out is True

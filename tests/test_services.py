from __future__ import annotations

import socket
import threading
import urllib.error
from typing import Any, Dict, List

import pytest

from gocardless_pro import (
    ApiError,
    ClientConfig,
    DecodeError,
    GoCardlessClient,
    InvalidStateError,
    MissingResultError,
    RequestCancelledError,
    RequestOptionError,
    ResponseError,
    TransportError,
    with_cancel_event,
    with_header,
    with_idempotency_key,
    with_retries,
    with_timeout,
)
from gocardless_pro.models import MandateImportCreateParams, MandatePdfCreateParams, MandatePdfLinks
from gocardless_pro.version import CLIENT_LIB_VERSION

IMPORT = {"mandate_imports": {"id": "IM000010790WX1", "scheme": "bacs", "status": "created", "created_at": "2024-05-01T10:00:00.000Z"}}


def test_fixed_headers_on_read_requests(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT)
    client.mandate_imports.get("IM000010790WX1")

    sent = fake_http.requests[0]
    assert sent["method"] == "GET"
    assert sent["url"] == "https://api.example.com/mandate_imports/IM000010790WX1"
    headers = sent["headers"]
    assert headers["authorization"] == "Bearer test-token"
    assert headers["gocardless-version"] == "2015-07-06"
    assert headers["gocardless-client-library"] == "gocardless-pro-python"
    assert headers["gocardless-client-version"] == CLIENT_LIB_VERSION
    assert headers["user-agent"].startswith(f"gocardless-pro-python/{CLIENT_LIB_VERSION} python/")
    assert "idempotency-key" not in headers
    assert "content-type" not in headers
    assert sent["body"] is None


def test_create_sends_wrapped_body_and_returns_record(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT, status=201)
    result = client.mandate_imports.create(MandateImportCreateParams(scheme="bacs"))

    assert result.id == "IM000010790WX1"
    assert result.status == "created"
    sent = fake_http.requests[0]
    assert sent["method"] == "POST"
    assert sent["url"] == "https://api.example.com/mandate_imports"
    assert sent["body"] == {"mandate_imports": {"scheme": "bacs"}}
    assert sent["headers"]["content-type"] == "application/json"
    assert sent["headers"]["idempotency-key"]


def test_records_are_immutable(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT)
    result = client.mandate_imports.get("IM000010790WX1")
    with pytest.raises(Exception):
        result.status = "cancelled"


def test_generated_idempotency_key_is_reused_across_retries(fake_http, client: GoCardlessClient) -> None:
    fake_http.fail(urllib.error.URLError("connection reset"))
    fake_http.reply("upstream timeout", status=503)
    fake_http.reply(IMPORT)
    client.mandate_imports.submit("IM000010790WX1")

    keys = {r["headers"]["idempotency-key"] for r in fake_http.requests}
    assert len(fake_http.requests) == 3
    assert len(keys) == 1
    bodies = [r["body"] for r in fake_http.requests]
    assert bodies == [{"data": {}}] * 3


def test_separate_calls_get_distinct_idempotency_keys(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT).reply(IMPORT)
    client.mandate_imports.create(MandateImportCreateParams(scheme="bacs"))
    client.mandate_imports.create(MandateImportCreateParams(scheme="bacs"))
    first, second = (r["headers"]["idempotency-key"] for r in fake_http.requests)
    assert first != second


def test_supplied_idempotency_key_and_headers(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT)
    client.mandate_imports.cancel(
        "IM000010790WX1",
        options=[with_idempotency_key("cancel-IM1"), with_header("GoCardless-Version", "2099-01-01")],
    )
    sent = fake_http.requests[0]
    assert sent["url"] == "https://api.example.com/mandate_imports/IM000010790WX1/actions/cancel"
    assert sent["headers"]["idempotency-key"] == "cancel-IM1"
    assert sent["headers"]["gocardless-version"] == "2099-01-01"


def test_identity_is_url_quoted(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT)
    client.mandate_imports.get("IM 1/../x")
    assert fake_http.requests[0]["url"] == "https://api.example.com/mandate_imports/IM%201%2F..%2Fx"


def test_structured_error_on_non_2xx_is_raised(fake_http, client: GoCardlessClient) -> None:
    body = {
        "error": {
            "type": "invalid_state",
            "code": 422,
            "message": "Mandate import has already been submitted",
            "request_id": "req-123",
        }
    }
    fake_http.reply(body, status=422)
    with pytest.raises(InvalidStateError) as excinfo:
        client.mandate_imports.submit("IM1", options=[with_retries(0)])
    assert excinfo.value.status_code == 422
    assert excinfo.value.request_id == "req-123"


def test_error_envelope_on_2xx_beats_payload(fake_http, client: GoCardlessClient) -> None:
    body = {
        "error": {"type": "invalid_api_usage", "code": 400, "message": "bad cursor"},
        "currency_exchange_rates": [{"rate": "1.1"}],
        "meta": {"cursors": {"after": "", "before": ""}, "limit": 50},
    }
    fake_http.reply(body)
    with pytest.raises(ApiError) as excinfo:
        client.currency_exchange_rates.list(options=[with_retries(0)])
    assert excinfo.value.message == "bad cursor"


def test_empty_envelope_is_missing_result(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({})
    with pytest.raises(MissingResultError):
        client.mandate_imports.get("IM1", options=[with_retries(0)])


def test_missing_result_is_not_retried(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({}).reply(IMPORT)
    with pytest.raises(MissingResultError):
        client.mandate_imports.get("IM1")
    assert len(fake_http.requests) == 1


def test_non_object_error_is_decode_error(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({"error": "boom", **IMPORT})
    with pytest.raises(DecodeError):
        client.mandate_imports.get("IM1", options=[with_retries(0)])


def test_list_with_null_records_is_an_empty_page(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({"currency_exchange_rates": None, "meta": None})
    page = client.currency_exchange_rates.list()
    assert page.items == []
    assert page.meta is None
    assert len(fake_http.requests) == 1


def test_list_without_records_or_meta_is_missing(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({"other": []})
    with pytest.raises(MissingResultError):
        client.currency_exchange_rates.list()
    assert len(fake_http.requests) == 1


def test_retries_exhausted_surface_last_error(fake_http, client: GoCardlessClient) -> None:
    for _ in range(4):
        fake_http.reply("<html>oops</html>", status=500)
    with pytest.raises(ResponseError) as excinfo:
        client.mandate_imports.get("IM1")
    assert excinfo.value.status_code == 500
    assert len(fake_http.requests) == 4


def test_transport_errors_are_wrapped(fake_http, client: GoCardlessClient) -> None:
    fake_http.fail(urllib.error.URLError("name resolution failed"))
    fake_http.fail(socket.timeout("timed out"))
    with pytest.raises(TransportError) as excinfo:
        client.mandate_imports.get("IM1", options=[with_retries(1)])
    assert excinfo.value.code == "NETWORK_ERROR"
    assert isinstance(excinfo.value.__cause__, OSError)


def test_malformed_json_is_decode_error(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(b"{oops")
    with pytest.raises(DecodeError):
        client.mandate_imports.get("IM1", options=[with_retries(0)])


def test_payload_with_wrong_shape_is_decode_error(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({"mandate_imports": "not-an-object"})
    with pytest.raises(DecodeError):
        client.mandate_imports.get("IM1", options=[with_retries(0)])


def test_option_failure_sends_nothing(fake_http, client: GoCardlessClient) -> None:
    with pytest.raises(RequestOptionError):
        client.mandate_imports.create(MandateImportCreateParams(scheme="bacs"), options=[with_retries(-2)])
    assert fake_http.requests == []


def test_cancelled_event_stops_call(fake_http, client: GoCardlessClient) -> None:
    event = threading.Event()
    event.set()
    with pytest.raises(RequestCancelledError):
        client.mandate_imports.get("IM1", options=[with_cancel_event(event)])
    assert fake_http.requests == []


def test_timeout_option_reaches_transport(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply(IMPORT).reply(IMPORT)
    client.mandate_imports.get("IM1")
    client.mandate_imports.get("IM1", options=[with_timeout(2.5)])
    assert [r["timeout"] for r in fake_http.requests] == [30.0, 2.5]


def test_mandate_pdf_create(fake_http, client: GoCardlessClient) -> None:
    fake_http.reply({"mandate_pdfs": {"url": "https://pdfs.example.com/m.pdf", "expires_at": "2024-05-01T10:30:00Z"}})
    pdf = client.mandate_pdfs.create(
        MandatePdfCreateParams(links=MandatePdfLinks(mandate="MD123")),
        options=[with_header("Accept-Language", "fr")],
    )
    assert pdf.url == "https://pdfs.example.com/m.pdf"
    sent = fake_http.requests[0]
    assert sent["url"] == "https://api.example.com/mandate_pdfs"
    assert sent["body"] == {"mandate_pdfs": {"links": {"mandate": "MD123"}}}
    assert sent["headers"]["accept-language"] == "fr"
    assert sent["headers"]["idempotency-key"]


def test_http_events_are_logged(fake_http, client: GoCardlessClient, events: List[Dict[str, Any]]) -> None:
    fake_http.reply("busy", status=503).reply(IMPORT, request_id="req-ok")
    client.mandate_imports.get("IM1")
    assert [e["event"] for e in events] == ["http_error", "retry", "http_request"]
    assert events[0]["status_code"] == 503
    assert events[2]["request_id"] == "req-ok"
    assert events[2]["attempt"] == 2
    assert events[2]["path"] == "/mandate_imports/IM1"


def test_logger_failures_do_not_break_requests(fake_http) -> None:
    def broken_logger(event: Dict[str, Any]) -> None:
        raise RuntimeError("log sink down")

    client = GoCardlessClient(ClientConfig(access_token="t", endpoint="https://api.example.com", logger=broken_logger))
    fake_http.reply(IMPORT)
    assert client.mandate_imports.get("IM1").status == "created"

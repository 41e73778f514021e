from __future__ import annotations

import io
import json
import urllib.error
from typing import Any, Dict, List, Optional, Union

import pytest

from gocardless_pro import ClientConfig, GoCardlessClient


class _DummyResponse:
    def __init__(self, body: bytes, status: int = 200, request_id: Optional[str] = None):
        self._body = body
        self.status = status
        self.headers = {"X-Request-Id": request_id} if request_id else {}

    def __enter__(self) -> "_DummyResponse":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        return False

    def read(self) -> bytes:
        return self._body


def _encode(body: Union[bytes, str, Dict[str, Any]]) -> bytes:
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


class FakeHttp:
    def __init__(self) -> None:
        self.queue: List[Any] = []
        self.requests: List[Dict[str, Any]] = []

    def reply(self, body: Union[bytes, str, Dict[str, Any]], status: int = 200, request_id: Optional[str] = None) -> "FakeHttp":
        if status >= 400:
            self.queue.append(
                urllib.error.HTTPError(
                    url="https://api.example.com",
                    code=status,
                    msg="error",
                    hdrs={"X-Request-Id": request_id} if request_id else {},
                    fp=io.BytesIO(_encode(body)),
                )
            )
        else:
            self.queue.append(_DummyResponse(_encode(body), status=status, request_id=request_id))
        return self

    def fail(self, exc: Exception) -> "FakeHttp":
        self.queue.append(exc)
        return self

    def urlopen(self, req: Any, timeout: float = 30, context: Any = None) -> Any:
        self.requests.append(
            {
                "url": req.full_url,
                "method": req.get_method(),
                "headers": {k.lower(): v for k, v in req.header_items()},
                "body": json.loads(req.data.decode("utf-8")) if req.data else None,
                "timeout": timeout,
            }
        )
        if not self.queue:
            raise AssertionError(f"unexpected request to {req.full_url}")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    fake = FakeHttp()
    monkeypatch.setattr("gocardless_pro.transport.request.urlopen", fake.urlopen)
    return fake


@pytest.fixture
def events() -> List[Dict[str, Any]]:
    return []


@pytest.fixture
def client(events: List[Dict[str, Any]]) -> GoCardlessClient:
    config = ClientConfig(access_token="test-token", endpoint="https://api.example.com/", logger=events.append)
    return GoCardlessClient(config)

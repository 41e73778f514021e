from __future__ import annotations

import http.client
import ssl
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib import error, request

from .errors import TransportError


def _header(headers: Any, name: str) -> Optional[str]:
    if not headers:
        return None
    value = headers.get(name) if hasattr(headers, "get") else None
    if value is not None:
        return str(value)
    lowered = name.lower()
    try:
        items = headers.items()
    except AttributeError:
        return None
    for key, val in items:
        if str(key).lower() == lowered:
            return str(val)
    return None


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def request_id(self) -> Optional[str]:
        return _header(self.headers, "X-Request-Id")


class HttpTransport:
    def __init__(self, ssl_context: Optional[ssl.SSLContext] = None) -> None:
        self.ssl_context = ssl_context

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: Dict[str, str],
        body: Optional[bytes],
        timeout_seconds: float,
    ) -> HttpResponse:
        req = request.Request(url=url, data=body, headers=dict(headers), method=method)
        try:
            with request.urlopen(req, timeout=timeout_seconds, context=self.ssl_context) as resp:
                raw = resp.read()
                return HttpResponse(
                    status_code=int(getattr(resp, "status", 200)),
                    body=raw,
                    headers=dict(resp.headers.items()) if resp.headers else {},
                )
        except error.HTTPError as exc:
            try:
                raw = exc.read() or b""
            except (OSError, http.client.HTTPException):
                raw = b""
            return HttpResponse(
                status_code=int(exc.code),
                body=raw,
                headers=dict(exc.headers.items()) if exc.headers else {},
            )
        except error.URLError as exc:
            reason = getattr(exc, "reason", None)
            raise TransportError(str(reason) if reason is not None else str(exc)) from exc
        except (OSError, http.client.HTTPException) as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

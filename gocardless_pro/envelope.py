"""Decoding of the ``{"error"?: ..., "<resource_key>"?: ...}`` response envelope."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

from .errors import ApiError, DecodeError, MissingResultError, ResponseError

EnvelopeKind = Literal["error", "payload", "missing"]


@dataclass(frozen=True)
class Envelope:
    kind: EnvelopeKind
    resource_key: str
    body: Dict[str, Any] = field(default_factory=dict)
    error: Optional[ApiError] = None
    payload: Any = None
    request_id: Optional[str] = None

    def unwrap(self) -> Any:
        if self.kind == "error" and self.error is not None:
            raise self.error
        if self.kind == "missing":
            raise MissingResultError(self.resource_key, request_id=self.request_id)
        return self.payload


def _parse_json_object(raw: bytes, request_id: Optional[str]) -> Dict[str, Any]:
    try:
        text = raw.decode("utf-8")
        parsed = json.loads(text) if text.strip() else None
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}", request_id=request_id) from exc
    if not isinstance(parsed, dict):
        raise DecodeError(
            f"expected a JSON object envelope, got {type(parsed).__name__}",
            request_id=request_id,
        )
    return parsed


def decode_envelope(
    raw: bytes,
    resource_key: str,
    *,
    status_code: Optional[int] = None,
    request_id: Optional[str] = None,
    list_result: bool = False,
) -> Envelope:
    body = _parse_json_object(raw, request_id)
    err = body.get("error")
    if err is not None and not isinstance(err, dict):
        raise DecodeError(
            f"expected \"error\" to be an object, got {type(err).__name__}",
            request_id=request_id,
        )
    if err is not None:
        return Envelope(
            kind="error",
            resource_key=resource_key,
            body=body,
            error=ApiError.from_envelope(err, status_code=status_code, request_id=request_id),
            request_id=request_id,
        )
    # A list page exists once its records or meta key appears, even as null.
    if list_result:
        payload = body if resource_key in body or "meta" in body else None
    else:
        payload = body.get(resource_key)
    if payload is None:
        return Envelope(kind="missing", resource_key=resource_key, body=body, request_id=request_id)
    return Envelope(kind="payload", resource_key=resource_key, body=body, payload=payload, request_id=request_id)


def check_response(status_code: int, raw: bytes, *, request_id: Optional[str] = None) -> None:
    if 200 <= status_code < 300:
        return
    text = raw.decode("utf-8", errors="replace")
    try:
        parsed = json.loads(text) if text.strip() else None
    except ValueError:
        parsed = None
    if isinstance(parsed, dict) and isinstance(parsed.get("error"), dict):
        raise ApiError.from_envelope(parsed["error"], status_code=status_code, request_id=request_id)
    raise ResponseError(
        status_code=status_code,
        message=f"HTTP {status_code}",
        request_id=request_id,
        body_preview=text[:500],
    )

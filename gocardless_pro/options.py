from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Mapping, Optional

from .errors import RequestOptionError

DEFAULT_RETRIES = 3


@dataclass
class RequestOptions:
    retries: int = DEFAULT_RETRIES
    idempotency_key: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: Optional[float] = None
    cancel_event: Optional[threading.Event] = None


RequestOption = Callable[[RequestOptions], None]


def new_idempotency_key() -> str:
    return str(uuid.uuid4())


def with_retries(retries: int) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
            raise RequestOptionError(f"retries must be a non-negative integer, got {retries!r}")
        options.retries = retries

    return apply


def with_idempotency_key(key: str) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        if not (key or "").strip():
            raise RequestOptionError("idempotency key must not be empty")
        options.idempotency_key = key

    return apply


def with_header(name: str, value: str) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        if not (name or "").strip():
            raise RequestOptionError("header name must not be empty")
        options.headers[name] = str(value)

    return apply


def with_headers(headers: Mapping[str, str]) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        for name, value in headers.items():
            with_header(name, value)(options)

    return apply


def with_timeout(seconds: float) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        if seconds is None or seconds <= 0:
            raise RequestOptionError(f"timeout must be positive, got {seconds!r}")
        options.timeout_seconds = float(seconds)

    return apply


def with_cancel_event(event: threading.Event) -> RequestOption:
    def apply(options: RequestOptions) -> None:
        options.cancel_event = event

    return apply


def resolve_options(options: Iterable[RequestOption] = (), *, mutating: bool = False) -> RequestOptions:
    resolved = RequestOptions()
    for option in options:
        option(resolved)
    if mutating and not resolved.idempotency_key:
        resolved.idempotency_key = new_idempotency_key()
    return resolved

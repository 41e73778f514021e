from __future__ import annotations

import threading
import time
from typing import Callable, Optional, TypeVar

from .errors import GoCardlessError, RequestCancelledError

T = TypeVar("T")


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelledError("request cancelled by caller")


def backoff_delay(backoff_base_seconds: float, attempt: int) -> float:
    if backoff_base_seconds <= 0:
        return 0.0
    return backoff_base_seconds * (2 ** attempt)


def execute(
    attempt: Callable[[], T],
    retries: int,
    *,
    backoff_base_seconds: float = 0.0,
    cancel_event: Optional[threading.Event] = None,
    on_retry: Optional[Callable[[int, GoCardlessError], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    attempts = max(retries, 0) + 1
    last_exc: Optional[GoCardlessError] = None
    for n in range(attempts):
        _check_cancelled(cancel_event)
        try:
            return attempt()
        except RequestCancelledError:
            raise
        except GoCardlessError as exc:
            last_exc = exc
            if n + 1 >= attempts:
                break
            if on_retry is not None:
                on_retry(n + 1, exc)
            delay = backoff_delay(backoff_base_seconds, n)
            if delay > 0:
                if cancel_event is None:
                    sleep(delay)
                elif cancel_event.wait(delay):
                    raise RequestCancelledError("request cancelled by caller")
    if last_exc is None:
        raise RuntimeError("Request failed without explicit exception")
    raise last_exc

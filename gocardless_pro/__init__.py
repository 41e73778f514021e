"""Python client for the GoCardless Pro API."""
from __future__ import annotations

from .client import GoCardlessClient
from .config import ClientConfig
from .errors import (
    ApiError,
    ConfigurationError,
    DecodeError,
    GoCardlessError,
    GoCardlessInternalError,
    InvalidApiUsageError,
    InvalidStateError,
    MissingResultError,
    RequestCancelledError,
    RequestOptionError,
    ResponseError,
    TransportError,
    ValidationFailedError,
)
from .options import (
    RequestOptions,
    with_cancel_event,
    with_header,
    with_headers,
    with_idempotency_key,
    with_retries,
    with_timeout,
)
from .version import CLIENT_LIB_VERSION

__version__ = CLIENT_LIB_VERSION

__all__ = [
    "ApiError",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "GoCardlessClient",
    "GoCardlessError",
    "GoCardlessInternalError",
    "InvalidApiUsageError",
    "InvalidStateError",
    "MissingResultError",
    "RequestCancelledError",
    "RequestOptionError",
    "RequestOptions",
    "ResponseError",
    "TransportError",
    "ValidationFailedError",
    "with_cancel_event",
    "with_header",
    "with_headers",
    "with_idempotency_key",
    "with_retries",
    "with_timeout",
]

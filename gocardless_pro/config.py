from __future__ import annotations

import os
import ssl
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import certifi

from .errors import ConfigurationError

ENVIRONMENTS: Dict[str, str] = {
    "live": "https://api.gocardless.com",
    "sandbox": "https://api-sandbox.gocardless.com",
}

Logger = Callable[[Dict[str, Any]], None]


def _default_ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default).strip() or default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class ClientConfig:
    access_token: str
    endpoint: str = ENVIRONMENTS["live"]
    timeout_seconds: float = 30.0
    retry_backoff_seconds: float = 0.0
    logger: Optional[Logger] = None
    ssl_context: ssl.SSLContext = field(default_factory=_default_ssl_context, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not (self.access_token or "").strip():
            raise ConfigurationError("An access token is required.")
        if not (self.endpoint or "").strip():
            raise ConfigurationError("An API endpoint is required.")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be positive.")
        if self.retry_backoff_seconds < 0:
            raise ConfigurationError("retry_backoff_seconds must not be negative.")
        object.__setattr__(self, "endpoint", self.endpoint.strip().rstrip("/"))

    @classmethod
    def for_environment(cls, access_token: str, environment: str = "live", **kwargs: Any) -> "ClientConfig":
        normalized = (environment or "live").strip().lower()
        if normalized not in ENVIRONMENTS:
            raise ConfigurationError(
                f"Unsupported environment: {environment!r} (expected one of {', '.join(sorted(ENVIRONMENTS))})"
            )
        return cls(access_token=access_token, endpoint=ENVIRONMENTS[normalized], **kwargs)

    @classmethod
    def from_env(cls, logger: Optional[Logger] = None) -> "ClientConfig":
        token = os.getenv("GOCARDLESS_ACCESS_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("GOCARDLESS_ACCESS_TOKEN is required")
        environment = os.getenv("GOCARDLESS_ENVIRONMENT", "live").strip() or "live"
        timeout_seconds = _float_env("GOCARDLESS_TIMEOUT_SECONDS", "30")
        backoff = _float_env("GOCARDLESS_RETRY_BACKOFF_SECONDS", "0")
        endpoint = os.getenv("GOCARDLESS_ENDPOINT", "").strip()
        if endpoint:
            return cls(
                access_token=token,
                endpoint=endpoint,
                timeout_seconds=timeout_seconds,
                retry_backoff_seconds=backoff,
                logger=logger,
            )
        return cls.for_environment(
            token,
            environment,
            timeout_seconds=timeout_seconds,
            retry_backoff_seconds=backoff,
            logger=logger,
        )

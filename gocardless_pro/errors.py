from __future__ import annotations

from typing import Any, Dict, List, Optional


class GoCardlessError(Exception):
    pass


class ConfigurationError(GoCardlessError):
    pass


class RequestOptionError(GoCardlessError):
    pass


class RequestCancelledError(GoCardlessError):
    pass


class TransportError(GoCardlessError):
    def __init__(self, message: str, *, request_id: Optional[str] = None):
        super().__init__(message)
        self.code = "NETWORK_ERROR"
        self.message = message
        self.request_id = request_id


class ResponseError(GoCardlessError):
    def __init__(
        self,
        *,
        status_code: int,
        message: str,
        request_id: Optional[str] = None,
        body_preview: str = "",
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.request_id = request_id
        self.body_preview = body_preview


class DecodeError(GoCardlessError):
    def __init__(self, message: str, *, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.request_id = request_id


class MissingResultError(GoCardlessError):
    def __init__(self, resource_key: str, *, request_id: Optional[str] = None):
        super().__init__(f"missing result: response carried neither error nor {resource_key!r}")
        self.resource_key = resource_key
        self.request_id = request_id


class ApiError(GoCardlessError):
    """Structured error decoded from the ``error`` field of a response envelope."""

    def __init__(
        self,
        *,
        status_code: Optional[int],
        type: str,
        code: Optional[int],
        message: str,
        documentation_url: Optional[str] = None,
        request_id: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.type = type
        self.code = code
        self.message = message
        self.documentation_url = documentation_url
        self.request_id = request_id
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        details = "; ".join(
            f"{err.get('field')} {err.get('message')}" if err.get("field") else str(err.get("message"))
            for err in self.errors
        )
        return f"{self.message} ({details})"

    @classmethod
    def from_envelope(
        cls,
        error: Dict[str, Any],
        *,
        status_code: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> "ApiError":
        error_type = str(error.get("type") or "")
        error_cls = _ERROR_TYPES.get(error_type, ApiError)
        raw_code = error.get("code")
        try:
            code = int(raw_code) if raw_code is not None else status_code
        except (TypeError, ValueError):
            code = status_code
        errors = error.get("errors")
        return error_cls(
            status_code=status_code if status_code is not None else code,
            type=error_type,
            code=code,
            message=str(error.get("message") or f"API error {code}"),
            documentation_url=error.get("documentation_url"),
            request_id=error.get("request_id") or request_id,
            errors=[e for e in errors if isinstance(e, dict)] if isinstance(errors, list) else None,
        )


class InvalidApiUsageError(ApiError):
    pass


class InvalidStateError(ApiError):
    pass


class ValidationFailedError(ApiError):
    pass


class GoCardlessInternalError(ApiError):
    pass


_ERROR_TYPES = {
    "invalid_api_usage": InvalidApiUsageError,
    "invalid_state": InvalidStateError,
    "validation_failed": ValidationFailedError,
    "gocardless": GoCardlessInternalError,
}

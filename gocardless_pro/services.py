from __future__ import annotations

import dataclasses
import time
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .config import ClientConfig, Logger
from .encoding import Params, compact, encode_body, encode_query
from .endpoints import ENDPOINTS, Endpoint
from .envelope import Envelope, check_response, decode_envelope
from .errors import ApiError, DecodeError, GoCardlessError, ResponseError, TransportError
from .models import (
    CurrencyExchangeRateListParams,
    CurrencyExchangeRateListResult,
    MandateImport,
    MandateImportCreateParams,
    MandatePdf,
    MandatePdfCreateParams,
)
from .options import RequestOption, RequestOptions, resolve_options
from .pagination import ListPagingIterator
from .retry import execute
from .transport import HttpResponse, HttpTransport
from .version import API_VERSION, CLIENT_LIB_VERSION, CLIENT_LIBRARY, user_agent


class ResourceService:
    def __init__(self, config: ClientConfig, transport: Optional[HttpTransport] = None) -> None:
        self.config = config
        self.transport = transport or HttpTransport(ssl_context=config.ssl_context)

    def _emit_log(self, event: Dict[str, Any]) -> None:
        log_fn: Optional[Logger] = self.config.logger
        if not log_fn:
            return
        try:
            log_fn(event)
        except Exception:
            pass

    def _headers(self, endpoint: Endpoint, options: RequestOptions) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.config.access_token}",
            "GoCardless-Version": API_VERSION,
            "GoCardless-Client-Library": CLIENT_LIBRARY,
            "GoCardless-Client-Version": CLIENT_LIB_VERSION,
            "User-Agent": user_agent(),
        }
        if endpoint.mutating:
            headers["Content-Type"] = "application/json"
            if options.idempotency_key:
                headers["Idempotency-Key"] = options.idempotency_key
        headers.update(options.headers)
        return headers

    def _call(
        self,
        endpoint: Endpoint,
        *,
        identity: Optional[str] = None,
        params: Params = None,
        options: Sequence[RequestOption] = (),
    ) -> Any:
        resolved = resolve_options(options, mutating=endpoint.mutating)
        path = endpoint.build_path(identity)
        url = f"{self.config.endpoint}{path}"
        query_keys: List[str] = []
        body: Optional[bytes] = None
        if endpoint.body_key is not None:
            body = encode_body(endpoint.body_key, params)
        else:
            query = encode_query(params)
            if query:
                url = f"{url}?{query}"
                query_keys = sorted(compact(params).keys())
        headers = self._headers(endpoint, resolved)
        timeout = resolved.timeout_seconds or self.config.timeout_seconds
        attempt_no = {"n": 0}

        def log_fields(started: float) -> Dict[str, Any]:
            return {
                "method": endpoint.method,
                "path": path,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                "attempt": attempt_no["n"],
                "has_body": body is not None,
                "query_keys": query_keys,
            }

        def attempt() -> Envelope:
            attempt_no["n"] += 1
            started = time.perf_counter()
            try:
                response = self.transport.send(
                    endpoint.method,
                    url,
                    headers=headers,
                    body=body,
                    timeout_seconds=timeout,
                )
            except TransportError as exc:
                self._emit_log({
                    "event": "network_error",
                    **log_fields(started),
                    "status_code": None,
                    "request_id": None,
                    "error": exc.message,
                })
                raise
            try:
                envelope = self._decode(endpoint, response)
            except (ApiError, ResponseError) as exc:
                self._emit_log({
                    "event": "http_error",
                    **log_fields(started),
                    "status_code": response.status_code,
                    "request_id": exc.request_id,
                    "error_type": getattr(exc, "type", None),
                })
                raise
            self._emit_log({
                "event": "http_request",
                **log_fields(started),
                "status_code": response.status_code,
                "request_id": response.request_id,
            })
            return envelope

        def on_retry(attempt_number: int, exc: GoCardlessError) -> None:
            self._emit_log({
                "event": "retry",
                "method": endpoint.method,
                "path": path,
                "attempt": attempt_number,
                "error": type(exc).__name__,
                "idempotency_key": resolved.idempotency_key,
            })

        envelope = execute(
            attempt,
            resolved.retries,
            backoff_base_seconds=self.config.retry_backoff_seconds,
            cancel_event=resolved.cancel_event,
            on_retry=on_retry,
        )
        # A 2xx with no result is final; it never consumes retries.
        return envelope.unwrap()

    def _decode(self, endpoint: Endpoint, response: HttpResponse) -> Envelope:
        request_id = response.request_id
        check_response(response.status_code, response.body, request_id=request_id)
        envelope = decode_envelope(
            response.body,
            endpoint.envelope_key,
            status_code=response.status_code,
            request_id=request_id,
            list_result=endpoint.list_result,
        )
        if envelope.kind == "error" and envelope.error is not None:
            raise envelope.error
        if envelope.kind != "payload":
            return envelope
        try:
            record = endpoint.result_model.model_validate(envelope.payload)
        except ValidationError as exc:
            raise DecodeError(
                f"{endpoint.id} response did not match {endpoint.result_model.__name__}: {exc}",
                request_id=request_id,
            ) from exc
        return dataclasses.replace(envelope, payload=record)


class CurrencyExchangeRateService(ResourceService):
    def list(
        self,
        params: Optional[CurrencyExchangeRateListParams] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> CurrencyExchangeRateListResult:
        return self._call(ENDPOINTS["currency_exchange_rates.list"], params=params, options=options)

    def all(
        self,
        params: Optional[CurrencyExchangeRateListParams] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> ListPagingIterator[CurrencyExchangeRateListResult]:
        def fetch_page(page_params: Dict[str, Any], page_options: Sequence[RequestOption]) -> CurrencyExchangeRateListResult:
            return self._call(ENDPOINTS["currency_exchange_rates.list"], params=page_params, options=page_options)

        return ListPagingIterator(fetch_page, params, options)


class MandateImportService(ResourceService):
    def create(
        self,
        params: Optional[MandateImportCreateParams] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> MandateImport:
        return self._call(ENDPOINTS["mandate_imports.create"], params=params, options=options)

    def get(
        self,
        identity: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> MandateImport:
        return self._call(ENDPOINTS["mandate_imports.get"], identity=identity, params=params, options=options)

    def submit(
        self,
        identity: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> MandateImport:
        return self._call(ENDPOINTS["mandate_imports.submit"], identity=identity, params=params, options=options)

    def cancel(
        self,
        identity: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> MandateImport:
        return self._call(ENDPOINTS["mandate_imports.cancel"], identity=identity, params=params, options=options)


class MandatePdfService(ResourceService):
    # Accept-Language selects the PDF language; pass it with with_header().
    def create(
        self,
        params: Optional[MandatePdfCreateParams] = None,
        *,
        options: Sequence[RequestOption] = (),
    ) -> MandatePdf:
        return self._call(ENDPOINTS["mandate_pdfs.create"], params=params, options=options)

"""Typed failures raised by the account REST adapter.

Use cases translate these into ``UseCaseError`` via
``sedaos.usecases.error_mapping.map_api_error``; nothing above the use-case
layer should see transport exceptions.
"""
from __future__ import annotations

from typing import Any, Optional


class ApiError(RuntimeError):
    """Base class for REST adapter failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        backend_message: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.backend_message = backend_message
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the account service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        backend_message: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            backend_message=backend_message,
            payload=payload,
            context=context,
        )


class ApiServerError(ApiError):
    """HTTP 5xx from the account service."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        backend_message: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=status,
            backend_message=backend_message,
            payload=payload,
            context=context,
        )


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(self, message: str, *, context: Optional[str] = None) -> None:
        super().__init__(message, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except ValueError:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def first_string(payload: Any) -> Optional[str]:
    if isinstance(payload, str):
        text = payload.strip()
        return text or None
    if isinstance(payload, dict):
        for key in ("message", "detail", "error", "title"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            if isinstance(value, (list, dict)):
                candidate = first_string(value)
                if candidate:
                    return candidate
    if isinstance(payload, list):
        for item in payload:
            candidate = first_string(item)
            if candidate:
                return candidate
    return None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = first_string(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


def raise_for_status(resp: Any, ctx: str) -> None:
    """Raise the matching ``ApiError`` subclass for non-2xx responses."""
    status = int(resp.status_code)
    if 200 <= status < 300:
        return
    payload = parse_error_payload(resp)
    message = build_error_message(ctx, status, payload)
    backend_message = first_string(payload)
    if 400 <= status < 500:
        raise ApiClientError(
            message,
            status=status,
            backend_message=backend_message,
            payload=payload,
            context=ctx,
        )
    if status >= 500:
        raise ApiServerError(
            message,
            status=status,
            backend_message=backend_message,
            payload=payload,
            context=ctx,
        )
    raise ApiError(message, status=status, payload=payload, context=ctx)

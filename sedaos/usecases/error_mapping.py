"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Optional

from sedaos.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
)
from sedaos.domain.ports import UseCaseError

CONNECTION_MESSAGE = "Connection error. Check your internet connection."
DUPLICATE_MESSAGE = "Email or nick already in use by another user."

_DUPLICATE_MARKERS = (
    "llave duplicada",
    "clau duplicada",
    "duplicate key",
    "ya existe",
    "ja existeix",
    "already exists",
)
_CONNECTION_MARKERS = ("unable to resolve", "failed to connect")


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: str,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by a port call.
        default_code: Code used when the exception is not an ``ApiError``.
        default_message: Prefix for messages of unclassified failures.

    Returns:
        UseCaseError carrying a message suitable for a toast.
    """
    if isinstance(exc, UseCaseError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("CONNECTION_FAILED", CONNECTION_MESSAGE)
    if isinstance(exc, ApiClientError):
        return _map_client_error(exc)
    if isinstance(exc, ApiServerError):
        status = exc.status or 500
        return UseCaseError(
            "SERVER_ERROR",
            exc.backend_message or f"Server error (code {status}).",
        )
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", _with_detail(default_message, str(exc)))

    text = str(exc)
    lowered = text.lower()
    if "409" in lowered or "conflict" in lowered or _is_duplicate(lowered):
        return UseCaseError("CONFLICT", DUPLICATE_MESSAGE)
    if any(marker in lowered for marker in _CONNECTION_MARKERS):
        return UseCaseError("CONNECTION_FAILED", CONNECTION_MESSAGE)
    return UseCaseError(default_code, _with_detail(default_message, text))


def _map_client_error(exc: ApiClientError) -> UseCaseError:
    status = exc.status or 0
    backend = exc.backend_message
    if status == 409:
        if backend and not _is_duplicate(backend.lower()):
            return UseCaseError("CONFLICT", backend)
        return UseCaseError("CONFLICT", DUPLICATE_MESSAGE)
    if status == 400:
        return UseCaseError("INVALID_DATA", backend or "Invalid data. Please review the fields.")
    if status == 401:
        return UseCaseError("SESSION_EXPIRED", "Session expired, please log in again.")
    if status == 403:
        return UseCaseError("FORBIDDEN", backend or "You are not allowed to perform this action.")
    if status == 404:
        return UseCaseError("NOT_FOUND", backend or "Resource not found.")
    return UseCaseError("REQUEST_FAILED", backend or f"Server error (code {status}).")


def _is_duplicate(lowered: str) -> bool:
    return any(marker in lowered for marker in _DUPLICATE_MARKERS)


def _with_detail(base: str, detail: Optional[str]) -> str:
    detail_text = (detail or "").strip()
    if detail_text:
        return f"{base}: {detail_text}"
    return base


__all__ = ["map_api_error", "CONNECTION_MESSAGE", "DUPLICATE_MESSAGE"]

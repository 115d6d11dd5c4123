"""Shared HTTP transport utilities for the account REST adapter.

This module provides a thin wrapper around ``requests.Session`` so the adapter
can share timeout policy, retry behavior, and bearer-token header
construction.

Dependencies:
    - ``requests`` for network I/O.
    - ``sedaos.adapters.api_errors.ApiTimeoutError`` for typed transport failures.

Call context:
    - Constructed by ``sedaos/adapters/account_rest.py``.
    - Used only inside adapter methods; use cases interact through ports.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests import exceptions as req_exc

from sedaos.adapters.api_errors import ApiTimeoutError

TokenProvider = Callable[[], Optional[str]]


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for JSON API calls.
        retries: Number of retry attempts after the initial request.
    """
    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """Shared requests wrapper with bearer-token headers and retry loops.

    This class is transport-only. Callers provide endpoint URLs and decide how
    to map non-2xx responses into domain/use-case errors.
    """

    def __init__(self, cfg: HttpConfig, token_provider: Optional[TokenProvider] = None) -> None:
        """Create a retry-enabled session.

        Args:
            cfg: Shared timeout and retry settings.
            token_provider: Callable returning the current bearer token, or
                ``None`` when no session is active.
        """
        self.session = requests.Session()
        self.cfg = cfg
        self._token_provider = token_provider

    def _headers(self, json_body: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _send(
        self,
        method: str,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send one request with retries on timeout/connectivity failures.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
        """
        context = f"{method} {url}"
        data = None if json_body is None else json.dumps(json_body)
        sender = getattr(self.session, method.lower())
        last_err: ApiTimeoutError | None = None
        attempts = self.cfg.retries + 1
        for _ in range(attempts):
            try:
                return sender(
                    url,
                    data=data,
                    headers=self._headers(json_body=json_body is not None),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
        raise last_err

    def get(self, url: str, *, timeout: Optional[int] = None) -> requests.Response:
        return self._send("GET", url, timeout=timeout)

    def post(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        return self._send("POST", url, json_body=json_body, timeout=timeout)

    def put(
        self,
        url: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        return self._send("PUT", url, json_body=json_body, timeout=timeout)


__all__ = ["HttpConfig", "RetryingSession", "TokenProvider"]

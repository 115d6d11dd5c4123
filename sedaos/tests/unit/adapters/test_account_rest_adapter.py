from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
from requests import exceptions as req_exc

from sedaos.adapters.account_rest import AccountRestAdapter
from sedaos.adapters.api_errors import ApiClientError, ApiError, ApiServerError, ApiTimeoutError


class _Response:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text or ("" if payload is None else json.dumps(payload))

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _SessionStub:
    """Stands in for ``requests.Session``; replies are queued per call."""

    def __init__(self, *replies: Any) -> None:
        self.replies: List[Any] = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def _reply(self, method: str, url: str, data: Optional[str], headers: Dict[str, str], timeout: int):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "body": json.loads(data) if data else None,
                "headers": headers,
                "timeout": timeout,
            }
        )
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def get(self, url, data=None, headers=None, timeout=None):
        return self._reply("GET", url, data, headers, timeout)

    def post(self, url, data=None, headers=None, timeout=None):
        return self._reply("POST", url, data, headers, timeout)

    def put(self, url, data=None, headers=None, timeout=None):
        return self._reply("PUT", url, data, headers, timeout)


USER_JSON = {
    "id": 1,
    "nick": "joan",
    "nom": "Joan",
    "cognom1": "Garcia",
    "cognom2": None,
    "rol": 1,
    "nif": "12345678Z",
    "email": "joan@example.com",
    "tlf": "612345678",
    "carrer": "Carrer Major 1",
    "localitat": "Lleida",
    "cp": "25001",
    "provincia": "Lleida",
}


def _adapter(*replies: Any, **kwargs: Any) -> tuple[AccountRestAdapter, _SessionStub]:
    adapter = AccountRestAdapter("http://library.test/", **kwargs)
    stub = _SessionStub(*replies)
    adapter.session.session = stub
    return adapter, stub


def test_requires_base_url() -> None:
    with pytest.raises(ValueError):
        AccountRestAdapter("  ")


def test_login_stores_token_and_sends_bearer_header() -> None:
    adapter, stub = _adapter(
        _Response(200, {"token": "abc123", "id": 1, "rol": 1, "nick": "joan"}),
        _Response(200, USER_JSON),
    )

    session = adapter.login("joan", "oldpass")
    profile = adapter.get_user(1)

    assert session.token == "abc123"
    assert adapter.token == "abc123"
    login_call, get_call = stub.calls
    assert login_call["url"] == "http://library.test/biblioteca/auth/login"
    assert login_call["body"] == {"nick": "joan", "password": "oldpass"}
    assert "Authorization" not in login_call["headers"]
    assert get_call["url"] == "http://library.test/biblioteca/usuaris/trobarUsuariPerId/1"
    assert get_call["headers"]["Authorization"] == "Bearer abc123"
    assert get_call["timeout"] == 10
    assert profile.full_name == "Joan Garcia"


def test_update_user_puts_payload() -> None:
    updated = dict(USER_JSON, nom="Jordi")
    adapter, stub = _adapter(_Response(200, updated), token="tok", request_timeout_s=4)

    profile = adapter.update_user(1, dict(USER_JSON, nom="Jordi", password="newpass1"))

    call = stub.calls[0]
    assert call["method"] == "PUT"
    assert call["url"] == "http://library.test/biblioteca/usuaris/actualitzarUsuari/1"
    assert call["body"]["password"] == "newpass1"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == 4
    assert profile.name == "Jordi"


def test_client_error_carries_backend_message() -> None:
    adapter, _ = _adapter(_Response(409, {"message": "Duplicate key nick"}))

    with pytest.raises(ApiClientError) as excinfo:
        adapter.update_user(1, USER_JSON)

    assert excinfo.value.status == 409
    assert excinfo.value.backend_message == "Duplicate key nick"
    assert str(excinfo.value) == "update_user[1]: Duplicate key nick (HTTP 409)"


def test_server_error_with_plain_text_body() -> None:
    adapter, _ = _adapter(_Response(503, None, text="Service Unavailable"))

    with pytest.raises(ApiServerError) as excinfo:
        adapter.get_user(2)

    assert excinfo.value.status == 503
    assert excinfo.value.backend_message == "Service Unavailable"


def test_unexpected_body_raises_api_error() -> None:
    adapter, _ = _adapter(_Response(200, ["not", "an", "object"]), _Response(200, {"nick": "x"}))

    with pytest.raises(ApiError, match="expected object response"):
        adapter.get_user(1)
    with pytest.raises(ApiError, match="numeric 'id'"):
        adapter.get_user(1)


def test_timeouts_are_retried_then_raised() -> None:
    adapter, stub = _adapter(
        req_exc.Timeout("slow"),
        req_exc.ConnectionError("down"),
        req_exc.Timeout("slow"),
        retries=2,
    )

    with pytest.raises(ApiTimeoutError):
        adapter.get_user(1)
    assert len(stub.calls) == 3


def test_retry_recovers_after_transient_failure() -> None:
    adapter, stub = _adapter(req_exc.ConnectionError("down"), _Response(200, USER_JSON), retries=1)

    assert adapter.get_user(1).nick == "joan"
    assert len(stub.calls) == 2


def test_logout_drops_token_even_on_failure() -> None:
    adapter, stub = _adapter(_Response(500, {"message": "boom"}), token="tok")

    with pytest.raises(ApiServerError):
        adapter.logout()

    assert adapter.token is None
    assert stub.calls[0]["url"] == "http://library.test/biblioteca/auth/logout"
    assert stub.calls[0]["headers"]["Authorization"] == "Bearer tok"

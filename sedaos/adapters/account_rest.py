from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from sedaos.domain.entities import AuthSession, UserProfile
from sedaos.domain.ports import AccountPort, UserId

from .api_errors import ApiError, raise_for_status
from .http_client import HttpConfig, RetryingSession

LOGIN_PATH = "/biblioteca/auth/login"
LOGOUT_PATH = "/biblioteca/auth/logout"
GET_USER_PATH = "/biblioteca/usuaris/trobarUsuariPerId/{user_id}"
UPDATE_USER_PATH = "/biblioteca/usuaris/actualitzarUsuari/{user_id}"


class AccountRestAdapter(AccountPort):
    """REST adapter for login, profile read/update and logout endpoints.

    The bearer token returned by ``login`` is kept on the adapter and sent on
    every following request until ``logout`` drops it.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        request_timeout_s: int = 10,
        retries: int = 2,
    ) -> None:
        if not base_url or not base_url.strip():
            raise ValueError("AccountRestAdapter requires a base URL")
        self.base_url = base_url.strip().rstrip("/")
        self.token = token
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.session = RetryingSession(self.cfg, token_provider=lambda: self.token)
        self._log = logging.getLogger(__name__)

    def login(self, nick: str, password: str) -> AuthSession:
        url = self._make_url(LOGIN_PATH)
        resp = self.session.post(url, json_body={"nick": nick, "password": password})
        raise_for_status(resp, "login")
        data = self._json_object(resp, "login")
        try:
            auth = AuthSession.from_payload(data)
        except ValueError as exc:
            raise ApiError(f"login: {exc}", status=resp.status_code, payload=data, context="login") from exc
        self.token = auth.token
        self._log.debug("Logged in as user %s", auth.user_id)
        return auth

    def get_user(self, user_id: UserId) -> UserProfile:
        ctx = f"get_user[{user_id}]"
        url = self._make_url(GET_USER_PATH.format(user_id=int(user_id)))
        resp = self.session.get(url)
        raise_for_status(resp, ctx)
        return self._profile(resp, ctx)

    def update_user(self, user_id: UserId, payload: Dict[str, Any]) -> UserProfile:
        ctx = f"update_user[{user_id}]"
        url = self._make_url(UPDATE_USER_PATH.format(user_id=int(user_id)))
        resp = self.session.put(url, json_body=dict(payload))
        raise_for_status(resp, ctx)
        return self._profile(resp, ctx)

    def logout(self) -> None:
        try:
            resp = self.session.post(self._make_url(LOGOUT_PATH))
            raise_for_status(resp, "logout")
        finally:
            self.token = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _make_url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _json_object(resp: requests.Response, ctx: str) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as exc:
            raise ApiError(f"{ctx}: invalid JSON response", status=resp.status_code, context=ctx) from exc
        if not isinstance(data, dict):
            raise ApiError(f"{ctx}: expected object response", status=resp.status_code, context=ctx)
        return data

    def _profile(self, resp: requests.Response, ctx: str) -> UserProfile:
        data = self._json_object(resp, ctx)
        try:
            return UserProfile.from_payload(data)
        except ValueError as exc:
            raise ApiError(f"{ctx}: {exc}", status=resp.status_code, payload=data, context=ctx) from exc

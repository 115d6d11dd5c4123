from __future__ import annotations

from typing import Any, Dict, List, Optional

from sedaos.domain.entities import AuthSession, UserProfile
from sedaos.domain.ports import AccountPort, UserId

from .api_errors import ApiClientError


class AccountMock(AccountPort):
    """In-memory account service used for tests and offline development.

    Mirrors the REST adapter's failure surface: unknown users raise a 404
    ``ApiClientError`` and wrong credentials a 401. ``fail_next`` lets tests
    queue one failure for the next call.
    """

    def __init__(self) -> None:
        self.users: Dict[UserId, UserProfile] = {}
        self.passwords: Dict[UserId, str] = {}
        self.token: Optional[str] = None
        self.calls: List[str] = []
        self.fail_next: Optional[Exception] = None

    def add_user(self, profile: UserProfile, password: str) -> None:
        self.users[profile.id] = profile
        self.passwords[profile.id] = password

    def login(self, nick: str, password: str) -> AuthSession:
        self._record("login")
        for user_id, profile in self.users.items():
            if profile.nick == nick and self.passwords.get(user_id) == password:
                self.token = f"token-{user_id}"
                return AuthSession(token=self.token, user_id=user_id, role=profile.role, nick=nick)
        raise ApiClientError("login: bad credentials (HTTP 401)", status=401, context="login")

    def get_user(self, user_id: UserId) -> UserProfile:
        self._record("get_user")
        return self._require(user_id)

    def update_user(self, user_id: UserId, payload: Dict[str, Any]) -> UserProfile:
        self._record("update_user")
        current = self._require(user_id)
        data = current.to_payload()
        password = payload.get("password")
        data.update({key: value for key, value in payload.items() if key != "password"})
        data["id"] = user_id
        updated = UserProfile.from_payload(data)
        self.users[user_id] = updated
        if password:
            self.passwords[user_id] = str(password)
        return updated

    def logout(self) -> None:
        self._record("logout")
        self.token = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_next is not None:
            exc, self.fail_next = self.fail_next, None
            raise exc

    def _require(self, user_id: UserId) -> UserProfile:
        try:
            return self.users[user_id]
        except KeyError:
            raise ApiClientError(
                f"get_user[{user_id}]: not found (HTTP 404)",
                status=404,
                context=f"get_user[{user_id}]",
            ) from None

from __future__ import annotations
from typing import Any, Dict, Optional, Protocol

from .entities import AuthSession, UserProfile

UserId = int
Route = str


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta


# ---- Ports (Hexagonal boundaries) ----
class AccountPort(Protocol):
    """Login, profile read/update and logout against the account service."""

    def login(self, nick: str, password: str) -> AuthSession: ...
    def get_user(self, user_id: UserId) -> UserProfile: ...
    def update_user(self, user_id: UserId, payload: Dict[str, Any]) -> UserProfile: ...
    def logout(self) -> None: ...


class NavigatorPort(Protocol):
    """Screen routing seen from the view-model layer.

    ``replace`` drops the current entry so back-navigation cannot return to it;
    ``reset`` clears the whole stack (used after logout).
    """

    def navigate(self, route: Route, *, replace: bool = False) -> None: ...
    def back(self) -> None: ...
    def reset(self, route: Route) -> None: ...


class SettingsStoragePort(Protocol):
    """Persistence for user settings."""

    def save_user_settings(self, payload: Dict[str, Any]) -> None: ...
    def load_user_settings(self) -> Dict[str, Any]: ...

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Tuple

from ..domain.entities import AuthSession, UserProfile
from ..domain.ports import NavigatorPort
from . import routes

LoadFn = Callable[[int, Callable[..., None]], None]
InfoRow = Tuple[str, str]


@dataclass(frozen=True)
class ProfileViewState:
    is_loading: bool = False
    profile: Optional[UserProfile] = None
    error: Optional[str] = None


class UserProfileVM:
    """Profile screen: one load at entry, blocking error, logout.

    ``session`` is the signed-in user. Without a session ``enter`` sends the
    user to the login route, once. Admins may view other users' profiles.
    """

    def __init__(
        self,
        *,
        session: Optional[AuthSession],
        load_fn: LoadFn,
        navigator: NavigatorPort,
        logout_fn: Optional[Callable[[], Any]] = None,
        on_change: Optional[Callable[["UserProfileVM"], None]] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.session = session
        self.load_fn = load_fn
        self.navigator = navigator
        self.logout_fn = logout_fn
        self.on_change = on_change
        self.state = ProfileViewState()
        self.user_id: Optional[int] = None
        self._ticket = 0
        self._left_screen = False

    # ---------- Entry ----------
    def enter(self, user_id: int) -> bool:
        """Start the profile load; returns ``False`` when redirected to login."""
        if self.session is None:
            self._log.error("No session available, redirecting to login")
            self._leave(routes.LOGIN)
            return False
        self.user_id = int(user_id)
        self._ticket += 1
        ticket = self._ticket
        self.state = ProfileViewState(is_loading=True)
        self._emit()

        def channel(success: bool, message: str, profile: Optional[UserProfile] = None) -> None:
            if ticket != self._ticket:
                return
            self._ticket += 1
            if success and profile is not None:
                self.state = ProfileViewState(profile=profile)
            else:
                self.state = ProfileViewState(error=message or "Error loading profile")
            self._emit()

        self._log.debug("Loading profile for user %s", self.user_id)
        try:
            self.load_fn(self.user_id, channel)
        except Exception as exc:
            self._log.exception("Profile load dispatch failed")
            channel(False, str(exc))
        return True

    def reload(self) -> bool:
        if self.user_id is None or self.state.is_loading:
            return False
        return self.enter(self.user_id)

    # ---------- Derived ----------
    @property
    def is_own_profile(self) -> bool:
        return self.session is not None and self.session.user_id == self.user_id

    @property
    def title(self) -> str:
        if self.is_own_profile:
            return "Admin panel" if self.session and self.session.is_admin else "My profile"
        nick = self.state.profile.nick if self.state.profile else "..."
        return f"Profile of {nick} (admin view)"

    def info_rows(self) -> List[InfoRow]:
        profile = self.state.profile
        if profile is None:
            return []
        rows: List[InfoRow] = [
            ("ID", str(profile.id)),
            ("Nick", profile.nick),
            ("Name", profile.full_name),
            ("Role", profile.role_name),
        ]
        optional = (
            ("NIF", profile.nif),
            ("Email", profile.email),
            ("Phone", profile.phone),
            ("Street", profile.street),
            ("Town", profile.town),
            ("Postal code", profile.postal_code),
            ("Province", profile.province),
        )
        rows.extend((label, value) for label, value in optional if value)
        return rows

    # ---------- Commands ----------
    def open_edit_profile(self) -> None:
        self.navigator.navigate(routes.EDIT_PROFILE)

    def open_change_password(self) -> None:
        self.navigator.navigate(routes.CHANGE_PASSWORD)

    def logout(self) -> None:
        if self._left_screen:
            return
        if self.logout_fn:
            self.logout_fn()
        self.session = None
        self.state = replace(self.state, profile=None)
        self._leave(routes.LOGIN)

    def _leave(self, route: str) -> None:
        if self._left_screen:
            return
        self._left_screen = True
        self.navigator.reset(route)
        self._emit()

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self)

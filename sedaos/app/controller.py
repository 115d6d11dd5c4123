"""Adapter and use-case wiring for the account screens.

This module owns lazy construction of the concrete REST adapter and the
use-case objects that depend on values in
:class:`sedaos.viewmodels.settings_vm.SettingsVM`. Flows call
``ensure_ready`` before any network action.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..adapters.account_rest import AccountRestAdapter
from ..domain.entities import AuthSession
from ..domain.ports import AccountPort
from ..usecases.change_password import ChangePassword
from ..usecases.load_profile import LoadProfile
from ..usecases.logout import Logout
from ..usecases.reset_password import ResetPassword
from ..usecases.update_profile import UpdateProfile
from ..viewmodels.settings_vm import SettingsVM


class AppController:
    """Create and cache the account adapter and use-cases from settings state.

    Call chain:
        ``sedaos.app.flows.AccountFlows`` holds one instance and calls
        ``ensure_ready`` before load/update/change/reset/logout operations.
        Passing ``account`` pins a ready-made port (mock or test double) and
        skips settings-driven construction.
    """

    def __init__(self, settings_vm: SettingsVM, *, account: Optional[AccountPort] = None) -> None:
        self._log = logging.getLogger(__name__)
        self.settings_vm = settings_vm
        self._fixed_account = account
        self._account: Optional[AccountPort] = account
        self.session: Optional[AuthSession] = None
        self.uc_load_profile: Optional[LoadProfile] = None
        self.uc_update_profile: Optional[UpdateProfile] = None
        self.uc_change_password: Optional[ChangePassword] = None
        self.uc_reset_password: Optional[ResetPassword] = None
        self.uc_logout: Optional[Logout] = None

    @property
    def account(self) -> Optional[AccountPort]:
        """Return the cached account port used for every request."""
        return self._account

    def login(self, nick: str, password: str) -> AuthSession:
        """Sign in through the account port and remember the session."""
        if not self.ensure_ready():
            raise RuntimeError("API base URL is not configured")
        assert self._account is not None
        self.session = self._account.login(nick, password)
        self._log.info("Signed in as %s", self.session.nick)
        return self.session

    def reset(self) -> None:
        """Drop cached adapters and use-cases.

        The next ``ensure_ready`` call rebuilds everything from the current
        settings values. The signed-in session is kept; only a logout clears it.
        """
        self._account = self._fixed_account
        self.uc_load_profile = None
        self.uc_update_profile = None
        self.uc_change_password = None
        self.uc_reset_password = None
        self.uc_logout = None

    def ensure_ready(self) -> bool:
        """Ensure the adapter and use-cases are available.

        Returns:
            ``True`` when dependencies are available, ``False`` when the API
            base URL is missing from settings.
        """
        if self._account is not None and self.uc_load_profile is not None:
            return True

        if self._account is None:
            base_url = (self.settings_vm.api_base_url or "").strip()
            if not base_url:
                self._log.warning("API base URL not configured")
                return False
            token = self.session.token if self.session else None
            self._account = AccountRestAdapter(
                base_url,
                token=token,
                request_timeout_s=self.settings_vm.request_timeout_s,
                retries=self.settings_vm.retries,
            )

        self.uc_load_profile = LoadProfile(self._account)
        self.uc_update_profile = UpdateProfile(self._account)
        self.uc_change_password = ChangePassword(self._account)
        self.uc_reset_password = ResetPassword(self._account)
        self.uc_logout = Logout(self._account)
        return True

    def logout(self) -> bool:
        """Best-effort backend logout; the local session is always dropped."""
        ok = True
        if self.ensure_ready():
            assert self.uc_logout is not None
            ok = self.uc_logout()
        self.session = None
        return ok

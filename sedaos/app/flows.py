"""Bind account view-models to use-cases, the task runner and navigation.

Each builder returns a ready view-model whose submit/load channel runs the
matching use-case through the injected :class:`TaskRunner` and reports back a
``(success, message)`` pair. View-models never see adapter exceptions.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..domain.entities import ProfileChanges, UserProfile
from ..domain.ports import NavigatorPort, UseCaseError
from ..usecases.error_mapping import map_api_error
from ..viewmodels import routes
from ..viewmodels.password_vm import ChangePasswordVM, PasswordChangeRequest
from ..viewmodels.presenter import Feedback, ResultPresenter
from ..viewmodels.profile_form_vm import EditProfileVM
from ..viewmodels.profile_vm import UserProfileVM
from .controller import AppController
from .task_runner import TaskRunner

PASSWORD_CHANGED = "Password changed successfully"
PASSWORD_RESET = "Password reset successfully"
PROFILE_UPDATED = "Profile updated"
NOT_CONFIGURED = "API base URL is not configured."
NO_SESSION = "No active session."


def error_message(exc: Exception) -> str:
    """User-facing text for any failure raised by a use-case call."""
    if isinstance(exc, UseCaseError):
        return exc.message
    return map_api_error(exc, default_code="UNEXPECTED", default_message="Unexpected error").message


class AccountFlows:
    """Factory for the three account screens.

    Args:
        controller: Owns the account port, use-cases and signed-in session.
        runner: Executes blocking calls and posts results to the UI thread.
        navigator: Route stack shared by all screens.
        show: Optional sink for toast/snackbar feedback.
    """

    def __init__(
        self,
        *,
        controller: AppController,
        runner: TaskRunner,
        navigator: NavigatorPort,
        show: Optional[Callable[[Feedback], None]] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.controller = controller
        self.runner = runner
        self.navigator = navigator
        self.show = show

    # ------------------------------------------------------------------
    # Change / reset password
    # ------------------------------------------------------------------
    def change_password(
        self,
        *,
        target_user_id: Optional[int] = None,
        on_change: Optional[Callable[[ChangePasswordVM], None]] = None,
    ) -> ChangePasswordVM:
        """Build the password screen.

        With ``target_user_id`` set to another user (admin sessions only) the
        screen resets that user's password and hides the current-password
        field. On success the screen is replaced by the target's profile.
        """
        session = self.controller.session
        own_id = session.user_id if session else None
        is_reset = (
            target_user_id is not None
            and target_user_id != own_id
            and session is not None
            and session.is_admin
        )
        user_id = target_user_id if is_reset else own_id

        def submit_fn(request: PasswordChangeRequest, channel: Callable[..., None]) -> None:
            if user_id is None:
                channel(False, NO_SESSION)
                return
            if not self.controller.ensure_ready():
                channel(False, NOT_CONFIGURED)
                return

            def work() -> None:
                if is_reset:
                    assert self.controller.uc_reset_password is not None
                    self.controller.uc_reset_password(user_id, request.new_password)
                    return
                assert self.controller.uc_load_profile is not None
                assert self.controller.uc_change_password is not None
                user = self.controller.uc_load_profile(user_id)
                self.controller.uc_change_password(user, request.current_password, request.new_password)

            success_message = PASSWORD_RESET if is_reset else PASSWORD_CHANGED
            self.runner.run(
                work,
                lambda _result: channel(True, success_message),
                lambda exc: channel(False, error_message(exc)),
            )

        def on_navigate() -> None:
            if user_id is None:
                self.navigator.back()
                return
            self.navigator.navigate(routes.profile_route(user_id), replace=True)

        return ChangePasswordVM(
            submit_fn=submit_fn,
            on_navigate=on_navigate,
            on_change=on_change,
            presenter=ResultPresenter(self.show),
            require_current=not is_reset,
        )

    # ------------------------------------------------------------------
    # Edit profile
    # ------------------------------------------------------------------
    def edit_profile(
        self,
        snapshot: Optional[UserProfile],
        *,
        on_change: Optional[Callable[[EditProfileVM], None]] = None,
    ) -> EditProfileVM:
        """Build the edit screen for ``snapshot``; ``None`` shows the load error."""

        def submit_fn(changes: ProfileChanges, channel: Callable[..., None]) -> None:
            if snapshot is None:
                channel(False, "Could not load the user.")
                return
            if not self.controller.ensure_ready():
                channel(False, NOT_CONFIGURED)
                return
            assert self.controller.uc_update_profile is not None
            update = self.controller.uc_update_profile
            self.runner.run(
                lambda: update(snapshot.id, changes),
                lambda saved: channel(True, PROFILE_UPDATED, saved),
                lambda exc: channel(False, error_message(exc)),
            )

        return EditProfileVM(
            snapshot=snapshot,
            submit_fn=submit_fn,
            rules=self.controller.settings_vm.profile_rules,
            on_navigate=self.navigator.back,
            on_change=on_change,
            presenter=ResultPresenter(self.show),
        )

    # ------------------------------------------------------------------
    # Profile view
    # ------------------------------------------------------------------
    def user_profile(
        self,
        *,
        on_change: Optional[Callable[[UserProfileVM], None]] = None,
    ) -> UserProfileVM:
        """Build the profile screen; call ``enter(user_id)`` to start loading."""

        def load_fn(user_id: int, channel: Callable[..., None]) -> None:
            if not self.controller.ensure_ready():
                channel(False, NOT_CONFIGURED)
                return
            assert self.controller.uc_load_profile is not None
            load = self.controller.uc_load_profile
            self.runner.run(
                lambda: load(user_id),
                lambda profile: channel(True, "", profile),
                lambda exc: channel(False, error_message(exc)),
            )

        return UserProfileVM(
            session=self.controller.session,
            load_fn=load_fn,
            navigator=self.navigator,
            logout_fn=self._logout,
            on_change=on_change,
        )

    def _logout(self) -> None:
        # Session state belongs to the UI thread; only the backend call is offloaded.
        ready = self.controller.ensure_ready()
        uc_logout = self.controller.uc_logout
        self.controller.session = None
        if not ready or uc_logout is None:
            return
        self.runner.run(uc_logout, self._logged_out, self._logout_failed)

    def _logged_out(self, ok: Any) -> None:
        if not ok:
            self._log.info("Logged out locally; backend logout did not complete")

    def _logout_failed(self, exc: Exception) -> None:
        self._log.warning("Logout failed: %s", exc)


__all__ = ["AccountFlows", "error_message"]

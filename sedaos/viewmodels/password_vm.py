from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from ..domain import validation as v
from .form_state import (
    FieldChanged,
    FieldsCleared,
    FormEvent,
    FormField,
    VisibilityToggled,
    reduce_form,
)
from .presenter import ResultPresenter
from .submission import SubmissionController, SubmissionState, SubmitFn

SECRET_FIELDS: Tuple[str, ...] = ("current", "new", "confirm")


@dataclass(frozen=True)
class PasswordChangeRequest:
    current_password: str
    new_password: str


@dataclass(frozen=True)
class PasswordForm:
    """Snapshot of the password fields; all flags are derived.

    With ``require_current=False`` (admin reset) the current-password field is
    ignored and only new/confirm are checked.
    """

    current: FormField = field(default_factory=FormField)
    new: FormField = field(default_factory=FormField)
    confirm: FormField = field(default_factory=FormField)
    require_current: bool = True

    @property
    def is_current_valid(self) -> bool:
        return not self.require_current or v.is_valid_password(self.current.value)

    @property
    def is_new_valid(self) -> bool:
        return v.is_valid_password(self.new.value)

    @property
    def is_strong(self) -> bool:
        return v.is_strong_password(self.new.value)

    @property
    def passwords_match(self) -> bool:
        return v.passwords_match(self.new.value, self.confirm.value)

    @property
    def is_different(self) -> bool:
        if not self.require_current:
            return bool(self.new.value)
        return v.is_different_password(self.current.value, self.new.value)

    @property
    def strength(self) -> Optional[float]:
        """Strength bar value, or ``None`` while the new password is empty."""
        if not self.new.value:
            return None
        return v.password_strength(self.new.value)

    @property
    def is_valid(self) -> bool:
        return self.is_current_valid and self.is_new_valid and self.passwords_match and self.is_different

    def current_error(self) -> Optional[str]:
        if self.require_current and v.shows_error(self.current.value, self.is_current_valid):
            return f"Minimum {v.MIN_PASSWORD_LENGTH} characters"
        return None

    def new_hint(self) -> Tuple[Optional[str], bool]:
        current = self.current.value if self.require_current else ""
        return v.new_password_hint(current, self.new.value)

    def confirm_hint(self) -> Tuple[Optional[str], bool]:
        return v.confirm_password_hint(self.new.value, self.confirm.value)


class ChangePasswordVM:
    """State and commands for the change-password screen.

    Fields stay editable while a submission is pending; only submit is gated.
    On success the three secret fields are cleared and ``on_navigate`` fires
    once (the app layer replaces this screen with the profile view).
    """

    def __init__(
        self,
        *,
        submit_fn: SubmitFn,
        on_navigate: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[["ChangePasswordVM"], None]] = None,
        presenter: Optional[ResultPresenter] = None,
        require_current: bool = True,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.form = PasswordForm(require_current=require_current)
        self.on_change = on_change
        self.presenter = presenter
        self.controller = SubmissionController(
            submit_fn=submit_fn,
            on_success=self._on_success,
            on_navigate=on_navigate,
            on_change=self._on_submission_change,
        )

    # ---------- Live form API ----------
    def dispatch(self, event: FormEvent) -> None:
        self.form = reduce_form(self.form, event)
        self._emit()

    def set_field(self, name: str, value: str) -> None:
        self.dispatch(FieldChanged(name, value))

    def toggle_visibility(self, name: str) -> None:
        self.dispatch(VisibilityToggled(name))

    # ---------- Derived ----------
    @property
    def submission(self) -> SubmissionState:
        return self.controller.state

    @property
    def is_form_valid(self) -> bool:
        return self.form.is_valid and not self.controller.is_pending

    @property
    def navigation_triggered(self) -> bool:
        return self.controller.navigation_triggered

    # ---------- Commands ----------
    def submit(self) -> bool:
        request = PasswordChangeRequest(
            current_password=self.form.current.value,
            new_password=self.form.new.value,
        )
        return self.controller.submit(request, form_valid=self.form.is_valid)

    def on_result(self, success: bool, message: str) -> None:
        self.controller.on_result(success, message)

    def go_back(self) -> bool:
        """Back arrow; shares the once-only navigation guard with success."""
        return self.controller.trigger_navigation()

    # ---------- Internals ----------
    def _on_success(self, _saved: object) -> None:
        self.form = reduce_form(self.form, FieldsCleared(SECRET_FIELDS))

    def _on_submission_change(self, state: SubmissionState) -> None:
        if self.presenter is not None:
            self.presenter.present(state)
        self._emit()

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self)

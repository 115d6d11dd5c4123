from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Callable, Dict, Optional

from ..domain.entities import ProfileChanges, UserProfile
from ..domain.validation import FULL_RULES, ProfileRules, profile_field_errors
from .form_state import FieldChanged, FormEvent, reduce_form
from .presenter import ResultPresenter
from .submission import SubmissionController, SubmissionState, SubmitFn


@dataclass(frozen=True)
class ProfileForm:
    nick: str = ""
    name: str = ""
    surname1: str = ""
    surname2: str = ""
    nif: str = ""
    email: str = ""
    phone: str = ""
    street: str = ""
    town: str = ""
    postal_code: str = ""
    province: str = ""

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileForm":
        return cls(
            nick=profile.nick,
            name=profile.name,
            surname1=profile.surname1 or "",
            surname2=profile.surname2 or "",
            nif=profile.nif or "",
            email=profile.email or "",
            phone=profile.phone or "",
            street=profile.street or "",
            town=profile.town or "",
            postal_code=profile.postal_code or "",
            province=profile.province or "",
        )

    def values(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def differs_from(self, profile: UserProfile, rules: ProfileRules) -> bool:
        baseline = ProfileForm.from_profile(profile).values()
        current = self.values()
        return any(current[key].strip() != baseline[key].strip() for key in rules.fields)

    def to_changes(self, rules: ProfileRules) -> ProfileChanges:
        contact: Dict[str, Optional[str]] = {}
        if rules.require_contact:
            contact = {
                "nif": self.nif.strip(),
                "email": self.email.strip(),
                "phone": self.phone.strip(),
                "street": self.street.strip(),
                "town": self.town.strip(),
                "postal_code": self.postal_code.strip(),
                "province": self.province.strip(),
            }
        return ProfileChanges(
            nick=self.nick.strip(),
            name=self.name.strip(),
            surname1=self.surname1.strip(),
            surname2=self.surname2.strip() or None,
            **contact,
        )


class EditProfileVM:
    """State and commands for the edit-profile screen.

    The snapshot passed in at entry is never mutated; after a successful save
    the VM swaps in the saved record so the form shows no pending changes while
    the edited values stay visible until ``on_navigate`` takes the user back.
    """

    def __init__(
        self,
        *,
        snapshot: Optional[UserProfile],
        submit_fn: SubmitFn,
        rules: ProfileRules = FULL_RULES,
        on_navigate: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[["EditProfileVM"], None]] = None,
        presenter: Optional[ResultPresenter] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.rules = rules
        self.snapshot = snapshot
        self.form = ProfileForm.from_profile(snapshot) if snapshot else ProfileForm()
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

    # ---------- Derived ----------
    @property
    def load_error(self) -> Optional[str]:
        if self.snapshot is None:
            return "Could not load the user."
        return None

    @property
    def submission(self) -> SubmissionState:
        return self.controller.state

    def field_errors(self) -> Dict[str, str]:
        return profile_field_errors(self.form.values(), self.rules)

    def visible_errors(self) -> Dict[str, str]:
        """Errors for fields the user has typed into (empty fields stay quiet)."""
        values = self.form.values()
        return {key: msg for key, msg in self.field_errors().items() if values.get(key)}

    @property
    def has_changes(self) -> bool:
        if self.snapshot is None:
            return False
        return self.form.differs_from(self.snapshot, self.rules)

    @property
    def is_form_valid(self) -> bool:
        return not self.field_errors() and not self.controller.is_pending

    @property
    def can_submit(self) -> bool:
        return self.snapshot is not None and self.has_changes and self.is_form_valid

    # ---------- Commands ----------
    def submit(self) -> bool:
        if self.snapshot is None or not self.has_changes:
            self._log.debug("Submit ignored: nothing to save")
            return False
        changes = self.form.to_changes(self.rules)
        return self.controller.submit(changes, form_valid=not self.field_errors())

    def on_result(self, success: bool, message: str, saved: Optional[UserProfile] = None) -> None:
        self.controller.on_result(success, message, saved)

    def cancel(self) -> Optional[str]:
        """Leave without saving; returns a notice when edits are discarded."""
        if self.controller.is_pending or self.controller.navigation_triggered:
            return None
        notice = "Changes discarded" if self.has_changes else None
        self.controller.trigger_navigation()
        return notice

    # ---------- Internals ----------
    def _on_success(self, saved: object) -> None:
        if isinstance(saved, UserProfile):
            self.snapshot = saved
        elif self.snapshot is not None:
            values = self.form.values()
            updates = {key: values[key].strip() or None for key in self.rules.fields}
            updates["nick"] = values["nick"].strip()
            updates["name"] = values["name"].strip()
            self.snapshot = self.snapshot.with_changes(**updates)

    def _on_submission_change(self, state: SubmissionState) -> None:
        if self.presenter is not None:
            self.presenter.present(state)
        self._emit()

    def _emit(self) -> None:
        if self.on_change:
            self.on_change(self)

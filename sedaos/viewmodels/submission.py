"""Submission gate shared by the account screens.

State machine::

    Idle --submit--> Pending --result(ok)--> Idle(success)
                             --result(err)-> Idle(failure)

A submit while pending or with an invalid form is a silent no-op; there is no
queueing and no cancellation. Each submission gets a one-shot result channel:
the first delivery wins, later or stale deliveries are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

ResultChannel = Callable[..., None]
SubmitFn = Callable[[Any, ResultChannel], None]


@dataclass(frozen=True)
class SubmissionState:
    is_pending: bool = False
    last_error: Optional[str] = None
    last_success_message: Optional[str] = None
    # Bumped once per delivered result so each outcome is presented once.
    sequence: int = 0

    @property
    def succeeded(self) -> bool:
        return not self.is_pending and self.last_success_message is not None


def begin_submission(state: SubmissionState) -> SubmissionState:
    return replace(state, is_pending=True, last_error=None, last_success_message=None)


def resolve_submission(state: SubmissionState, success: bool, message: str) -> SubmissionState:
    return SubmissionState(
        is_pending=False,
        last_error=None if success else message,
        last_success_message=message if success else None,
        sequence=state.sequence + 1,
    )


class SubmissionController:
    """Gate the external update on validity and the in-flight flag.

    Args:
        submit_fn: Called exactly once per accepted submit with the payload
            and a result channel ``(success, message, saved=None)``. It may
            answer synchronously or later from the UI thread.
        on_success: Hook run on success before navigation (clear secrets,
            refresh snapshots). Receives the optional ``saved`` value.
        on_navigate: Navigation trigger; fires at most once per controller.
        on_change: Notified after every state transition.
    """

    def __init__(
        self,
        *,
        submit_fn: SubmitFn,
        on_success: Optional[Callable[[Any], None]] = None,
        on_navigate: Optional[Callable[[], None]] = None,
        on_change: Optional[Callable[[SubmissionState], None]] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.submit_fn = submit_fn
        self.on_success = on_success
        self.on_navigate = on_navigate
        self.on_change = on_change
        self.state = SubmissionState()
        self.navigation_triggered = False
        self._ticket = 0

    @property
    def is_pending(self) -> bool:
        return self.state.is_pending

    def can_submit(self, form_valid: bool) -> bool:
        return bool(form_valid) and not self.state.is_pending

    def submit(self, payload: Any, *, form_valid: bool) -> bool:
        """Start a submission; returns ``False`` when the gate is closed."""
        if not self.can_submit(form_valid):
            self._log.debug("Submit ignored (valid=%s, pending=%s)", form_valid, self.state.is_pending)
            return False

        self.state = begin_submission(self.state)
        self._ticket += 1
        ticket = self._ticket
        delivered = False

        def channel(success: bool, message: str, saved: Any = None) -> None:
            nonlocal delivered
            if delivered or ticket != self._ticket:
                self._log.debug("Dropping duplicate result for submission %s", ticket)
                return
            delivered = True
            self.on_result(success, message, saved)

        self._notify()
        try:
            self.submit_fn(payload, channel)
        except Exception as exc:
            self._log.exception("Submission dispatch failed")
            channel(False, str(exc) or "Unexpected error.")
        return True

    def on_result(self, success: bool, message: str, saved: Any = None) -> None:
        """Apply a result: leave pending, keep the message, navigate once on success."""
        self.state = resolve_submission(self.state, bool(success), message)
        if success and self.on_success:
            self.on_success(saved)
        self._notify()
        if success:
            self.trigger_navigation()

    def trigger_navigation(self) -> bool:
        """Fire the navigation hook unless it already fired."""
        if self.navigation_triggered:
            return False
        self.navigation_triggered = True
        if self.on_navigate:
            self.on_navigate()
        return True

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.state)

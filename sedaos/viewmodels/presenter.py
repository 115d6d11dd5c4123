from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from .submission import SubmissionState

Duration = Literal["short", "long"]


@dataclass(frozen=True)
class Feedback:
    """Transient toast/snackbar content."""

    message: str
    is_error: bool
    duration: Duration


class ResultPresenter:
    """Turn delivered submission results into one-shot feedback.

    Errors are shown long and successes short. A result is presented once per
    occurrence; presenting the same state again yields nothing.
    """

    def __init__(self, show: Optional[Callable[[Feedback], None]] = None) -> None:
        self.show = show
        self._last_sequence = 0

    def present(self, state: SubmissionState) -> Optional[Feedback]:
        if state.is_pending or state.sequence <= self._last_sequence:
            return None
        self._last_sequence = state.sequence
        if state.last_error is not None:
            feedback = Feedback(message=state.last_error, is_error=True, duration="long")
        elif state.last_success_message is not None:
            feedback = Feedback(message=state.last_success_message, is_error=False, duration="short")
        else:
            return None
        if self.show:
            self.show(feedback)
        return feedback

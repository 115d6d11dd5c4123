from __future__ import annotations

import logging
from dataclasses import dataclass

from sedaos.domain.ports import AccountPort, UseCaseError, UserId
from sedaos.domain.validation import is_valid_password

from .error_mapping import map_api_error
from .update_profile import build_update_payload

_log = logging.getLogger(__name__)


@dataclass
class ResetPassword:
    """Admin flow: set another user's password without knowing the old one."""

    account: AccountPort

    def __call__(self, user_id: UserId, new_password: str) -> None:
        if not is_valid_password(new_password):
            raise UseCaseError("INVALID_PASSWORD", "The new password is too short.")
        _log.info("Resetting password for user %s", user_id)
        try:
            stored = self.account.get_user(user_id)
            self.account.update_user(user_id, build_update_payload(stored, password=new_password))
        except Exception as exc:
            err = map_api_error(
                exc,
                default_code="RESET_PASSWORD_FAILED",
                default_message="Error resetting password",
            )
            _log.warning("Password reset for user %s failed: %s", user_id, err.message)
            raise err from exc

from __future__ import annotations

import logging
from dataclasses import dataclass

from sedaos.adapters.api_errors import ApiClientError
from sedaos.domain.entities import UserProfile
from sedaos.domain.ports import AccountPort, UseCaseError
from sedaos.domain.validation import is_different_password, is_valid_password

from .error_mapping import map_api_error
from .update_profile import build_update_payload

_log = logging.getLogger(__name__)


@dataclass
class ChangePassword:
    """Change the signed-in user's password.

    The current password is verified by logging in with it before the record
    is updated, so a wrong current password surfaces as ``WRONG_PASSWORD``
    and nothing is written. The backend rejects bad credentials with 401 or
    403 depending on its security filter chain; both count as a wrong password.
    """

    account: AccountPort

    def __call__(self, user: UserProfile, current_password: str, new_password: str) -> None:
        if not is_valid_password(new_password):
            raise UseCaseError("INVALID_PASSWORD", "The new password is too short.")
        if not is_different_password(current_password, new_password):
            raise UseCaseError("SAME_PASSWORD", "The new password must be different.")

        _log.info("Changing password for user %s", user.id)
        try:
            try:
                self.account.login(user.nick, current_password)
            except ApiClientError as exc:
                if exc.status in (401, 403):
                    raise UseCaseError("WRONG_PASSWORD", "The current password is incorrect.") from exc
                raise
            payload = build_update_payload(user, password=new_password)
            self.account.update_user(user.id, payload)
        except Exception as exc:
            err = map_api_error(
                exc,
                default_code="CHANGE_PASSWORD_FAILED",
                default_message="Error changing password",
            )
            _log.warning("Password change for user %s failed: %s", user.id, err.message)
            raise err from exc

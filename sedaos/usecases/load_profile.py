from __future__ import annotations

import logging
from dataclasses import dataclass

from sedaos.domain.entities import UserProfile
from sedaos.domain.ports import AccountPort, UserId

from .error_mapping import map_api_error

_log = logging.getLogger(__name__)


@dataclass
class LoadProfile:
    account: AccountPort

    def __call__(self, user_id: UserId) -> UserProfile:
        _log.debug("Loading profile for user %s", user_id)
        try:
            return self.account.get_user(user_id)
        except Exception as exc:
            err = map_api_error(
                exc,
                default_code="LOAD_PROFILE_FAILED",
                default_message="Error loading profile",
            )
            _log.warning("Profile load for user %s failed: %s", user_id, err.message)
            raise err from exc

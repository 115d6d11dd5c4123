from __future__ import annotations

import logging
from dataclasses import dataclass

from sedaos.adapters.api_errors import ApiError
from sedaos.domain.ports import AccountPort

_log = logging.getLogger(__name__)


@dataclass
class Logout:
    """End the session; the local token is dropped even if the backend call fails."""

    account: AccountPort

    def __call__(self) -> bool:
        try:
            self.account.logout()
        except ApiError as exc:
            _log.warning("Backend logout failed, session dropped locally: %s", exc)
            return False
        return True

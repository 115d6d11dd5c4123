from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sedaos.domain.entities import ProfileChanges, UserProfile
from sedaos.domain.ports import AccountPort, UserId

from .error_mapping import map_api_error

_log = logging.getLogger(__name__)

# The backend rejects updates with missing contact data; these placeholders
# stand in when neither the form nor the stored record provides a value.
PLACEHOLDERS: Dict[str, str] = {
    "nif": "000000000",
    "localitat": "Desconeguda",
    "carrer": "Desconegut",
    "cp": "00000",
    "provincia": "Desconeguda",
    "tlf": "000000000",
    "email": "unknown@example.com",
}


def _pick(edited: Optional[str], stored: Optional[str], key: str) -> str:
    if edited is not None and edited.strip():
        return edited.strip()
    if stored:
        return stored
    return PLACEHOLDERS[key]


def build_update_payload(
    stored: UserProfile,
    changes: Optional[ProfileChanges] = None,
    *,
    password: Optional[str] = None,
) -> Dict[str, Any]:
    """Merge edits onto the stored record in the backend's update shape.

    The stored role is always kept. ``surname2`` becomes ``None`` when blank.
    """
    if changes is None:
        nick, name = stored.nick, stored.name
        surname1, surname2 = stored.surname1 or "", stored.surname2
        contact = ProfileChanges(nick=nick, name=name, surname1=surname1)
    else:
        nick, name = changes.nick.strip(), changes.name.strip()
        surname1 = changes.surname1.strip()
        surname2 = (changes.surname2 or "").strip() or None
        contact = changes

    payload: Dict[str, Any] = {
        "id": stored.id,
        "nick": nick,
        "nom": name,
        "cognom1": surname1,
        "cognom2": surname2,
        "rol": stored.role,
        "nif": _pick(contact.nif, stored.nif, "nif"),
        "localitat": _pick(contact.town, stored.town, "localitat"),
        "carrer": _pick(contact.street, stored.street, "carrer"),
        "cp": _pick(contact.postal_code, stored.postal_code, "cp"),
        "provincia": _pick(contact.province, stored.province, "provincia"),
        "tlf": _pick(contact.phone, stored.phone, "tlf"),
        "email": _pick(contact.email, stored.email, "email"),
    }
    if password is not None:
        payload["password"] = password
    return payload


@dataclass
class UpdateProfile:
    """Save profile edits for ``user_id`` and return the stored result."""

    account: AccountPort

    def __call__(self, user_id: UserId, changes: ProfileChanges) -> UserProfile:
        _log.info("Updating profile for user %s", user_id)
        try:
            stored = self.account.get_user(user_id)
            payload = build_update_payload(stored, changes)
            return self.account.update_user(user_id, payload)
        except Exception as exc:
            err = map_api_error(
                exc,
                default_code="UPDATE_PROFILE_FAILED",
                default_message="Error updating profile",
            )
            _log.warning("Profile update for user %s failed: %s", user_id, err.message)
            raise err from exc

"""Domain value objects shared across adapters, use-cases, and view models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

ROLE_USER = 1
ROLE_ADMIN = 2


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class UserProfile:
    """Read-only profile record as stored by the account service.

    Screens pre-populate editable fields from it and detect unsaved changes by
    comparing the live form values against it. It is never mutated in place;
    ``with_changes`` returns a new snapshot.
    """

    id: int
    nick: str
    name: str
    surname1: Optional[str] = None
    surname2: Optional[str] = None
    role: int = ROLE_USER
    nif: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    town: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValueError("UserProfile.id must be an integer.")
        if not isinstance(self.nick, str):
            raise ValueError("UserProfile.nick must be a string.")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def role_name(self) -> str:
        if self.role == ROLE_ADMIN:
            return "Admin"
        if self.role == ROLE_USER:
            return "User"
        return "Unknown"

    @property
    def full_name(self) -> str:
        parts = [self.name, self.surname1 or "", self.surname2 or ""]
        return " ".join(part for part in parts if part).strip()

    def with_changes(self, **changes: Any) -> "UserProfile":
        return replace(self, **changes)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "UserProfile":
        """Build a profile from the backend JSON shape (``nom``, ``cognom1``...)."""
        if not isinstance(payload, Mapping):
            raise ValueError("User payload must be a mapping.")
        try:
            user_id = int(payload["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("User payload is missing a numeric 'id'.") from exc
        return cls(
            id=user_id,
            nick=str(payload.get("nick") or ""),
            name=str(payload.get("nom") or ""),
            surname1=_opt_str(payload.get("cognom1")),
            surname2=_opt_str(payload.get("cognom2")),
            role=int(payload.get("rol") or ROLE_USER),
            nif=_opt_str(payload.get("nif")),
            email=_opt_str(payload.get("email")),
            phone=_opt_str(payload.get("tlf")),
            street=_opt_str(payload.get("carrer")),
            town=_opt_str(payload.get("localitat")),
            postal_code=_opt_str(payload.get("cp")),
            province=_opt_str(payload.get("provincia")),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nick": self.nick,
            "nom": self.name,
            "cognom1": self.surname1,
            "cognom2": self.surname2,
            "rol": self.role,
            "nif": self.nif,
            "email": self.email,
            "tlf": self.phone,
            "carrer": self.street,
            "localitat": self.town,
            "cp": self.postal_code,
            "provincia": self.province,
        }


@dataclass(frozen=True)
class ProfileChanges:
    """Editable subset of a profile as submitted by the edit-profile screen.

    ``None`` for a contact field means "not edited on this screen"; the update
    use-case then keeps the stored value.
    """

    nick: str
    name: str
    surname1: str
    surname2: Optional[str] = None
    nif: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    street: Optional[str] = None
    town: Optional[str] = None
    postal_code: Optional[str] = None
    province: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    """Result of a successful login against the account service."""

    token: str
    user_id: int
    role: int
    nick: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AuthSession":
        if not isinstance(payload, Mapping):
            raise ValueError("Login payload must be a mapping.")
        token = payload.get("token")
        if not isinstance(token, str) or not token:
            raise ValueError("Login payload is missing a token.")
        return cls(
            token=token,
            user_id=int(payload.get("id") or 0),
            role=int(payload.get("rol") or ROLE_USER),
            nick=_opt_str(payload.get("nick")),
        )

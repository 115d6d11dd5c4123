"""Pure field validators for the account screens.

Every function here is synchronous, deterministic and side-effect free so the
same rules run identically in view models, use-cases and tests.

Two profile rulesets exist side by side:

``full``
    Registration-style form: nick 3-10 characters, name and first surname
    (min 2), NIF, email, phone, postal code and a non-blank address.
``compact``
    Personal-data form: nick 3-50 characters limited to letters, digits and
    underscores, name and first surname 2-100 characters, no contact fields.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Literal, Mapping, Optional, Pattern, Tuple

FieldStatus = Literal["empty", "invalid", "valid"]

MIN_PASSWORD_LENGTH = 6
STRONG_PASSWORD_LENGTH = 8
VERY_STRONG_PASSWORD_LENGTH = 12
NAME_MIN_LENGTH = 2

NIF_PATTERN = re.compile(r"^[0-9]{8}[A-Z]$")
PHONE_PATTERN = re.compile(r"^[0-9]{9}$")
POSTAL_CODE_PATTERN = re.compile(r"^[0-9]{5}$")
NICK_CHARS_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
# Same shape as android.util.Patterns.EMAIL_ADDRESS.
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}"
    r"@"
    r"[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}"
    r"(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------
def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def _has_digit(text: str) -> bool:
    return any(ch.isdigit() for ch in text)


def _has_letter(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def _has_symbol(text: str) -> bool:
    return any(not ch.isalnum() for ch in text)


def is_strong_password(password: str) -> bool:
    return (
        len(password) >= STRONG_PASSWORD_LENGTH
        and _has_digit(password)
        and _has_letter(password)
    )


def is_different_password(current: str, new: str) -> bool:
    return bool(new) and new != current


def passwords_match(new: str, confirm: str) -> bool:
    return bool(new) and new == confirm


def password_strength(password: str) -> float:
    """Progress value in [0.0, 1.0] for the strength bar."""
    if (
        len(password) >= VERY_STRONG_PASSWORD_LENGTH
        and _has_digit(password)
        and _has_letter(password)
        and _has_symbol(password)
    ):
        return 1.0
    if is_strong_password(password):
        return 0.7
    if is_valid_password(password):
        return 0.4
    return 0.2


def new_password_hint(current: str, new: str) -> Tuple[Optional[str], bool]:
    """Return ``(message, is_error)`` shown under the new-password field."""
    if not new:
        return None, False
    if not is_valid_password(new):
        return f"Minimum {MIN_PASSWORD_LENGTH} characters", True
    if new == current:
        return "The new password must be different", True
    if is_strong_password(new):
        return "Strong password", False
    return "Acceptable password", False


def confirm_password_hint(new: str, confirm: str) -> Tuple[Optional[str], bool]:
    if not confirm:
        return None, False
    if passwords_match(new, confirm):
        return "Passwords match", False
    return "Passwords do not match", True


# ---------------------------------------------------------------------------
# Profile fields
# ---------------------------------------------------------------------------
def is_valid_nick(nick: str, *, min_length: int = 3, max_length: int = 10) -> bool:
    return min_length <= len(nick) <= max_length


def is_valid_name(value: str, *, min_length: int = NAME_MIN_LENGTH) -> bool:
    return len(value) >= min_length


def is_valid_nif(nif: str) -> bool:
    return NIF_PATTERN.fullmatch(nif) is not None


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone) is not None


def is_valid_postal_code(postal_code: str) -> bool:
    return POSTAL_CODE_PATTERN.fullmatch(postal_code) is not None


def field_status(value: str, valid: bool) -> FieldStatus:
    if not value:
        return "empty"
    return "valid" if valid else "invalid"


def shows_error(value: str, valid: bool) -> bool:
    """Inline errors stay hidden until the user has typed something."""
    return field_status(value, valid) == "invalid"


@dataclass(frozen=True)
class ProfileRules:
    """Length and presence rules for the edit-profile form."""

    name: str
    nick_min: int = 3
    nick_max: int = 10
    nick_pattern: Optional[Pattern[str]] = None
    name_max: Optional[int] = None
    require_contact: bool = True

    @property
    def fields(self) -> Tuple[str, ...]:
        base = ("nick", "name", "surname1", "surname2")
        if not self.require_contact:
            return base
        return base + CONTACT_FIELDS


CONTACT_FIELDS: Tuple[str, ...] = (
    "nif",
    "email",
    "phone",
    "street",
    "town",
    "postal_code",
    "province",
)

FULL_RULES = ProfileRules(name="full")
COMPACT_RULES = ProfileRules(
    name="compact",
    nick_max=50,
    nick_pattern=NICK_CHARS_PATTERN,
    name_max=100,
    require_contact=False,
)
RULESETS: Dict[str, ProfileRules] = {
    FULL_RULES.name: FULL_RULES,
    COMPACT_RULES.name: COMPACT_RULES,
}


def rules_for(name: str) -> ProfileRules:
    key = (name or "").strip().lower()
    try:
        return RULESETS[key]
    except KeyError:
        raise ValueError(f"Unknown profile ruleset: {name!r}") from None


def nick_error(nick: str, rules: ProfileRules) -> Optional[str]:
    if not nick.strip():
        return "Nick is required"
    if len(nick) < rules.nick_min:
        return f"Nick must have at least {rules.nick_min} characters"
    if len(nick) > rules.nick_max:
        return f"Nick cannot exceed {rules.nick_max} characters"
    if rules.nick_pattern is not None and not rules.nick_pattern.fullmatch(nick):
        return "Only letters, digits and underscores"
    return None


def _name_error(value: str, label: str, rules: ProfileRules) -> Optional[str]:
    if not value.strip():
        return f"{label} is required"
    if not is_valid_name(value):
        return f"{label} must have at least {NAME_MIN_LENGTH} characters"
    if rules.name_max is not None and len(value) > rules.name_max:
        return f"{label} is too long"
    return None


def _pattern_error(value: str, label: str, valid: bool, message: str) -> Optional[str]:
    if not value.strip():
        return f"{label} is required"
    if not valid:
        return message
    return None


def profile_field_errors(values: Mapping[str, str], rules: ProfileRules) -> Dict[str, str]:
    """Return ``{field: message}`` for every field that fails its rule.

    Blank mandatory fields are reported too; callers hide those until the user
    types (see :func:`shows_error`).
    """

    def get(key: str) -> str:
        return values.get(key) or ""

    errors: Dict[str, Optional[str]] = {
        "nick": nick_error(get("nick"), rules),
        "name": _name_error(get("name"), "Name", rules),
        "surname1": _name_error(get("surname1"), "First surname", rules),
    }
    surname2 = get("surname2")
    if rules.name_max is not None and len(surname2) > rules.name_max:
        errors["surname2"] = "Second surname is too long"

    if rules.require_contact:
        nif, email = get("nif"), get("email")
        phone, postal_code = get("phone"), get("postal_code")
        errors["nif"] = _pattern_error(nif, "NIF", is_valid_nif(nif), "8 digits followed by an uppercase letter")
        errors["email"] = _pattern_error(email, "Email", is_valid_email(email), "Invalid email address")
        errors["phone"] = _pattern_error(phone, "Phone", is_valid_phone(phone), "Phone must have 9 digits")
        errors["postal_code"] = _pattern_error(
            postal_code, "Postal code", is_valid_postal_code(postal_code), "Postal code must have 5 digits"
        )
        for key, label in (("street", "Street"), ("town", "Town"), ("province", "Province")):
            errors[key] = _pattern_error(get(key), label, True, "")

    return {key: msg for key, msg in errors.items() if msg}

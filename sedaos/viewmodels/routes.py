"""Route names the view models hand to the navigator."""

from __future__ import annotations

LOGIN = "login"
EDIT_PROFILE = "edit_profile"
CHANGE_PASSWORD = "change_password"
_PROFILE = "user_profile/{user_id}"


def profile_route(user_id: int) -> str:
    return _PROFILE.format(user_id=int(user_id))

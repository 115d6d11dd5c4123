"""Domain package exports for value objects, validators and ports."""

from .entities import (
    ROLE_ADMIN,
    ROLE_USER,
    AuthSession,
    ProfileChanges,
    UserProfile,
)
from .ports import AccountPort, NavigatorPort, SettingsStoragePort, UseCaseError

__all__ = [
    "ROLE_ADMIN",
    "ROLE_USER",
    "AccountPort",
    "AuthSession",
    "NavigatorPort",
    "ProfileChanges",
    "SettingsStoragePort",
    "UseCaseError",
    "UserProfile",
]

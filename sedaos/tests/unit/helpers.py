from __future__ import annotations

from typing import List, Tuple

from sedaos.domain.entities import ROLE_ADMIN, ROLE_USER, UserProfile


def make_profile(**overrides) -> UserProfile:
    values = dict(
        id=1,
        nick="joan",
        name="Joan",
        surname1="Garcia",
        surname2=None,
        role=ROLE_USER,
        nif="12345678Z",
        email="joan@example.com",
        phone="612345678",
        street="Carrer Major 1",
        town="Lleida",
        postal_code="25001",
        province="Lleida",
    )
    values.update(overrides)
    return UserProfile(**values)


def make_admin(**overrides) -> UserProfile:
    values = dict(id=9, nick="admin", name="Anna", surname1="Puig", role=ROLE_ADMIN)
    values.update(overrides)
    return make_profile(**values)


class RecordingNavigator:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []

    def navigate(self, route: str, *, replace: bool = False) -> None:
        self.calls.append(("navigate", route, "replace" if replace else "push"))

    def back(self) -> None:
        self.calls.append(("back",))

    def reset(self, route: str) -> None:
        self.calls.append(("reset", route))


class DeferredSubmit:
    """Submit function that keeps the result channel for the test to answer."""

    def __init__(self) -> None:
        self.payloads: list = []
        self.channels: list = []

    def __call__(self, payload, channel) -> None:
        self.payloads.append(payload)
        self.channels.append(channel)

    def answer(self, success: bool, message: str, saved=None) -> None:
        self.channels[-1](success, message, saved)

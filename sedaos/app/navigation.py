"""In-memory back stack implementing :class:`NavigatorPort`."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..domain.ports import NavigatorPort, Route


class NavigationStack(NavigatorPort):
    """Ordered route stack; the last entry is the visible screen.

    ``on_change`` receives the new top route after every transition so a UI
    shell can swap frames.
    """

    def __init__(self, start: Route, *, on_change: Optional[Callable[[Route], None]] = None) -> None:
        self._log = logging.getLogger(__name__)
        self._stack: List[Route] = [start]
        self.on_change = on_change

    @property
    def current(self) -> Route:
        return self._stack[-1]

    @property
    def entries(self) -> List[Route]:
        return list(self._stack)

    def navigate(self, route: Route, *, replace: bool = False) -> None:
        if replace:
            self._stack[-1] = route
        else:
            self._stack.append(route)
        self._log.debug("navigate -> %s (replace=%s)", route, replace)
        self._notify()

    def back(self) -> None:
        if len(self._stack) == 1:
            self._log.debug("back ignored at root %s", self.current)
            return
        self._stack.pop()
        self._notify()

    def reset(self, route: Route) -> None:
        self._stack = [route]
        self._log.debug("reset -> %s", route)
        self._notify()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self.current)


__all__ = ["NavigationStack"]

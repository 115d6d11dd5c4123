"""Bootstrap for the account screens.

A UI shell calls :func:`build_app` once at startup with its scheduler (Tk
``after`` or equivalent) and binds its frames to ``app.flows`` and
``app.navigator``. Startup configures logging, loads persisted settings,
applies the debug-logging preference and wires controller, runner,
navigation and flows.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..adapters.account_mock import AccountMock
from ..adapters.storage_local import StorageLocal
from ..domain.entities import UserProfile
from ..domain.ports import AccountPort, SettingsStoragePort
from ..utils import logging as logging_utils
from ..viewmodels import routes
from ..viewmodels.presenter import Feedback
from ..viewmodels.settings_vm import SettingsVM
from .controller import AppController
from .flows import AccountFlows
from .navigation import NavigationStack
from .task_runner import BackgroundRunner, ScheduleFn

STORAGE_ROOT_ENV = "SEDAOS_STORAGE_ROOT"
OFFLINE_ENV = "SEDAOS_OFFLINE"

DEMO_NICK = "demo"
DEMO_PASSWORD = "demo123"


def demo_account() -> AccountMock:
    """In-memory account service with one signed-up user for offline runs."""
    account = AccountMock()
    account.add_user(
        UserProfile(
            id=1,
            nick=DEMO_NICK,
            name="Demo",
            surname1="User",
            nif="12345678Z",
            email="demo@example.com",
            phone="600000000",
            street="Carrer Major 1",
            town="Lleida",
            postal_code="25001",
            province="Lleida",
        ),
        DEMO_PASSWORD,
    )
    return account


@dataclass
class AccountApp:
    """Wired runtime objects handed to the UI shell."""

    settings_vm: SettingsVM
    storage: SettingsStoragePort
    controller: AppController
    runner: BackgroundRunner
    navigator: NavigationStack
    flows: AccountFlows
    settings_error: Optional[str] = None

    def apply_logging_preferences(self) -> int:
        level = logging_utils.apply_gui_preferences(self.settings_vm.debug_logging)
        logging.getLogger(__name__).debug("Effective log level: %s", logging.getLevelName(level))
        return level

    def save_settings(self, payload: Dict) -> None:
        """``SettingsVM.on_save`` target: persist, rebuild adapters, relevel logs."""
        self.storage.save_user_settings(payload)
        self.controller.reset()
        self.apply_logging_preferences()

    def shutdown(self) -> None:
        self.runner.shutdown()


def _load_settings(settings_vm: SettingsVM, storage: SettingsStoragePort) -> Optional[str]:
    log = logging.getLogger(__name__)
    try:
        payload = storage.load_user_settings()
    except (OSError, ValueError) as exc:
        log.warning("Could not load settings: %s", exc)
        return f"Could not load settings: {exc}"
    try:
        settings_vm.apply_dict(payload)
    except ValueError as exc:
        log.warning("Ignoring invalid settings: %s", exc)
        return str(exc)
    return None


def build_app(
    schedule: ScheduleFn,
    *,
    storage: Optional[SettingsStoragePort] = None,
    account: Optional[AccountPort] = None,
    offline: Optional[bool] = None,
    show: Optional[Callable[[Feedback], None]] = None,
) -> AccountApp:
    """Configure logging and wire the account screens.

    Args:
        schedule: UI-thread scheduler compatible with ``after(delay_ms, cb)``.
        storage: Settings persistence; defaults to ``StorageLocal`` rooted at
            ``$SEDAOS_STORAGE_ROOT`` or the working directory.
        account: Pinned account port; skips settings-driven adapter creation.
        offline: Use the in-memory demo account. Defaults to ``$SEDAOS_OFFLINE``.
        show: Sink for toast/snackbar feedback.
    """
    logging_utils.configure_root()

    if storage is None:
        storage = StorageLocal(root_dir=os.environ.get(STORAGE_ROOT_ENV) or ".")
    if offline is None:
        offline = logging_utils.env_truthy(os.environ.get(OFFLINE_ENV))
    if account is None and offline:
        account = demo_account()

    settings_vm = SettingsVM()
    settings_error = _load_settings(settings_vm, storage)

    controller = AppController(settings_vm, account=account)
    runner = BackgroundRunner(schedule)
    navigator = NavigationStack(routes.LOGIN)
    flows = AccountFlows(controller=controller, runner=runner, navigator=navigator, show=show)

    app = AccountApp(
        settings_vm=settings_vm,
        storage=storage,
        controller=controller,
        runner=runner,
        navigator=navigator,
        flows=flows,
        settings_error=settings_error,
    )
    settings_vm.on_save = app.save_settings
    app.apply_logging_preferences()
    return app


__all__ = ["AccountApp", "build_app", "demo_account"]

from __future__ import annotations

from sedaos.adapters.account_mock import AccountMock
from sedaos.adapters.account_rest import AccountRestAdapter
from sedaos.app.controller import AppController
from sedaos.tests.unit.helpers import make_profile
from sedaos.viewmodels.settings_vm import SettingsVM


def test_controller_requires_base_url() -> None:
    controller = AppController(SettingsVM())

    assert controller.ensure_ready() is False
    assert controller.account is None
    assert controller.uc_load_profile is None


def test_controller_ensure_ready_wires_usecases() -> None:
    settings = SettingsVM()
    settings.api_base_url = "http://library.test"
    settings.request_timeout_s = 7
    settings.retries = 1

    controller = AppController(settings)

    assert controller.ensure_ready() is True
    adapter = controller.account
    assert isinstance(adapter, AccountRestAdapter)
    assert adapter.base_url == "http://library.test"
    assert adapter.cfg.request_timeout_s == 7
    assert adapter.cfg.retries == 1
    assert controller.uc_load_profile is not None
    assert controller.uc_update_profile is not None
    assert controller.uc_change_password is not None
    assert controller.uc_reset_password is not None
    assert controller.uc_logout is not None

    controller.reset()
    assert controller.account is None
    assert controller.uc_change_password is None
    assert controller.ensure_ready() is True
    assert controller.account is not adapter


def test_controller_login_and_logout_with_fixed_port() -> None:
    account = AccountMock()
    account.add_user(make_profile(), "oldpass")
    controller = AppController(SettingsVM(), account=account)

    session = controller.login("joan", "oldpass")
    assert controller.session is session
    assert session.user_id == 1

    controller.reset()
    assert controller.account is account

    assert controller.logout() is True
    assert controller.session is None
    assert account.calls == ["login", "logout"]

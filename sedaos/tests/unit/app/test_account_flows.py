from __future__ import annotations

import threading

import pytest

from sedaos.adapters.account_mock import AccountMock
from sedaos.adapters.api_errors import ApiClientError
from sedaos.app.controller import AppController
from sedaos.app.flows import AccountFlows, error_message
from sedaos.app.navigation import NavigationStack
from sedaos.app.task_runner import BackgroundRunner, InlineRunner
from sedaos.tests.unit.helpers import make_admin, make_profile
from sedaos.viewmodels.settings_vm import SettingsVM


class _Shell:
    def __init__(self, nick: str = "joan", password: str = "oldpass") -> None:
        self.account = AccountMock()
        self.account.add_user(make_profile(), "oldpass")
        self.account.add_user(make_admin(), "adminpass")
        self.controller = AppController(SettingsVM(), account=self.account)
        self.controller.login(nick, password)
        self.account.calls.clear()
        self.shown = []
        user_id = self.controller.session.user_id
        self.nav = NavigationStack(f"user_profile/{user_id}")
        self.flows = AccountFlows(
            controller=self.controller,
            runner=InlineRunner(),
            navigator=self.nav,
            show=self.shown.append,
        )


@pytest.fixture
def shell() -> _Shell:
    return _Shell()


def test_change_password_replaces_form_with_profile(shell: _Shell) -> None:
    shell.nav.navigate("change_password")
    vm = shell.flows.change_password()

    vm.set_field("current", "oldpass")
    vm.set_field("new", "newpass1")
    vm.set_field("confirm", "newpass1")
    assert vm.submit() is True

    assert shell.account.passwords[1] == "newpass1"
    assert vm.form.new.value == ""
    assert shell.shown[-1].message == "Password changed successfully"
    assert shell.nav.current == "user_profile/1"
    assert "change_password" not in shell.nav.entries


def test_change_password_wrong_current_stays_on_form(shell: _Shell) -> None:
    shell.nav.navigate("change_password")
    vm = shell.flows.change_password()

    vm.set_field("current", "badpass")
    vm.set_field("new", "newpass1")
    vm.set_field("confirm", "newpass1")
    vm.submit()

    assert shell.shown[-1].message == "The current password is incorrect."
    assert shell.shown[-1].is_error
    assert vm.form.current.value == "badpass"
    assert shell.nav.current == "change_password"


def test_admin_resets_another_users_password() -> None:
    shell = _Shell(nick="admin", password="adminpass")
    shell.nav.navigate("change_password")
    vm = shell.flows.change_password(target_user_id=1)

    assert vm.form.require_current is False
    vm.set_field("new", "resetpass")
    vm.set_field("confirm", "resetpass")
    vm.submit()

    assert shell.account.passwords[1] == "resetpass"
    assert shell.shown[-1].message == "Password reset successfully"
    assert shell.nav.current == "user_profile/1"


def test_non_admin_cannot_target_another_user(shell: _Shell) -> None:
    vm = shell.flows.change_password(target_user_id=9)

    assert vm.form.require_current is True


def test_edit_profile_saves_and_goes_back(shell: _Shell) -> None:
    shell.nav.navigate("edit_profile")
    snapshot = shell.account.users[1]
    vm = shell.flows.edit_profile(snapshot)

    vm.set_field("name", "Jordi")
    assert vm.submit() is True

    assert shell.account.users[1].name == "Jordi"
    assert vm.snapshot.name == "Jordi"
    assert vm.form.name == "Jordi"
    assert shell.shown[-1].message == "Profile updated"
    assert shell.nav.entries == ["user_profile/1"]


def test_edit_profile_conflict_is_reported(shell: _Shell) -> None:
    vm = shell.flows.edit_profile(shell.account.users[1])
    shell.account.fail_next = ApiClientError("ctx", status=409)

    vm.set_field("nick", "admin")
    vm.submit()

    assert shell.shown[-1].message == "Email or nick already in use by another user."
    assert vm.has_changes


def test_user_profile_loads_and_logs_out(shell: _Shell) -> None:
    vm = shell.flows.user_profile()

    assert vm.enter(1) is True
    assert vm.state.profile.nick == "joan"
    assert vm.title == "My profile"

    vm.logout()
    assert shell.controller.session is None
    assert shell.nav.entries == ["login"]
    assert shell.account.calls == ["get_user", "logout"]


def test_user_profile_load_failure_message(shell: _Shell) -> None:
    vm = shell.flows.user_profile()

    vm.enter(77)

    assert vm.state.error == "Resource not found."


def test_missing_base_url_is_reported() -> None:
    controller = AppController(SettingsVM())
    flows = AccountFlows(controller=controller, runner=InlineRunner(), navigator=NavigationStack("login"))

    vm = flows.edit_profile(make_profile())
    vm.set_field("name", "Jordi")
    vm.submit()

    assert vm.submission.last_error == "API base URL is not configured."
    assert error_message(RuntimeError("boom")) == "Unexpected error: boom"


class _ThreadRecordingAccount(AccountMock):
    def __init__(self) -> None:
        super().__init__()
        self.logout_threads = []

    def logout(self) -> None:
        self.logout_threads.append(threading.current_thread().name)
        super().logout()


def test_logout_clears_session_on_ui_thread_and_offloads_backend_call() -> None:
    account = _ThreadRecordingAccount()
    account.add_user(make_profile(), "oldpass")
    controller = AppController(SettingsVM(), account=account)
    controller.login("joan", "oldpass")

    scheduled = []
    posted = threading.Event()

    def schedule(delay_ms, callback):
        scheduled.append(callback)
        posted.set()
        return "after#1"

    runner = BackgroundRunner(schedule)
    nav = NavigationStack("user_profile/1")
    flows = AccountFlows(controller=controller, runner=runner, navigator=nav)
    try:
        vm = flows.user_profile()
        vm.logout()

        # Cleared before any worker result is delivered.
        assert controller.session is None
        assert nav.entries == ["login"]

        assert posted.wait(timeout=5)
        for callback in scheduled:
            callback()
    finally:
        runner.shutdown()

    assert account.logout_threads and account.logout_threads[0].startswith("sedaos-task")
    assert account.token is None
    assert controller.session is None

import threading

from sedaos.app.navigation import NavigationStack
from sedaos.app.task_runner import BackgroundRunner, InlineRunner


def test_navigation_stack_push_replace_back_reset():
    seen = []
    nav = NavigationStack("user_profile/1", on_change=seen.append)

    nav.navigate("change_password")
    assert nav.entries == ["user_profile/1", "change_password"]

    nav.navigate("user_profile/1", replace=True)
    assert nav.entries == ["user_profile/1", "user_profile/1"]

    nav.back()
    nav.back()
    assert nav.entries == ["user_profile/1"]

    nav.reset("login")
    assert nav.current == "login"
    assert seen == ["change_password", "user_profile/1", "user_profile/1", "login"]


def test_inline_runner_routes_results_and_errors():
    done, failed = [], []
    runner = InlineRunner()

    runner.run(lambda: 42, done.append, failed.append)
    runner.run(lambda: 1 / 0, done.append, failed.append)

    assert done == [42]
    assert isinstance(failed[0], ZeroDivisionError)


def test_background_runner_posts_results_through_scheduler():
    scheduled = []
    posted = threading.Event()

    def schedule(delay_ms, callback):
        scheduled.append((delay_ms, callback))
        posted.set()
        return "after#1"

    runner = BackgroundRunner(schedule)
    done, failed = [], []
    try:
        runner.run(lambda: threading.current_thread().name, done.append, failed.append)
        assert posted.wait(timeout=5)
    finally:
        runner.shutdown()

    # Nothing is delivered until the UI loop runs the scheduled callback.
    assert done == []
    delay, callback = scheduled[0]
    callback()
    assert delay == 0
    assert done[0].startswith("sedaos-task")
    assert failed == []

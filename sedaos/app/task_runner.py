"""Run blocking use-case calls off the UI thread and post results back.

The UI layer passes its scheduler (Tk ``after`` or an equivalent) into
:class:`BackgroundRunner`, so completion callbacks always run on the UI
thread where view-model state is mutated. :class:`InlineRunner` executes work
synchronously and is used by tests and scripts.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol

ScheduleFn = Callable[[int, Callable[[], None]], Any]
Work = Callable[[], Any]
OnDone = Callable[[Any], None]
OnError = Callable[[Exception], None]


class TaskRunner(Protocol):
    def run(self, work: Work, on_done: OnDone, on_error: OnError) -> None: ...


class InlineRunner:
    """Execute work immediately on the calling thread."""

    def run(self, work: Work, on_done: OnDone, on_error: OnError) -> None:
        try:
            result = work()
        except Exception as exc:
            on_error(exc)
            return
        on_done(result)


class BackgroundRunner:
    """Thread-pool runner that hands results to the UI scheduler.

    Args:
        schedule: Function compatible with ``after(delay_ms, callback)``.
        max_workers: Pool size; account requests are rare, one is plenty.
    """

    def __init__(self, schedule: ScheduleFn, *, max_workers: int = 1) -> None:
        self._log = logging.getLogger(__name__)
        self._schedule = schedule
        self._pool: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="sedaos-task",
        )

    def run(self, work: Work, on_done: OnDone, on_error: OnError) -> None:
        if self._pool is None:
            raise RuntimeError("BackgroundRunner is shut down")
        future = self._pool.submit(work)
        future.add_done_callback(lambda fut: self._deliver(fut, on_done, on_error))

    def shutdown(self) -> None:
        """Stop accepting work; in-flight results are still delivered."""
        if self._pool is not None:
            self._pool.shutdown(wait=False)
            self._pool = None

    def _deliver(self, future: Future, on_done: OnDone, on_error: OnError) -> None:
        exc = future.exception()
        if exc is not None:
            self._log.debug("Background task failed: %s", exc)
            self._schedule(0, lambda: on_error(exc))
            return
        result = future.result()
        self._schedule(0, lambda: on_done(result))


__all__ = ["BackgroundRunner", "InlineRunner", "ScheduleFn", "TaskRunner"]

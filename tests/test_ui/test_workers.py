"""QtTaskRunner delivers outcomes back on the GUI thread."""

from __future__ import annotations

import threading
import time
from typing import Any, List

from PySide6 import QtCore

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.ui.workers import QtTaskRunner


def wait_until_idle(qt_app, runner: QtTaskRunner, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while runner.active_count and time.monotonic() < deadline:
        qt_app.processEvents(QtCore.QEventLoop.ProcessEventsFlag.AllEvents, 50)
        time.sleep(0.01)
    assert runner.active_count == 0


def test_success_is_delivered_on_gui_thread(qt_app) -> None:
    runner = QtTaskRunner()
    results: List[Any] = []
    threads: List[threading.Thread] = []
    task_threads: List[threading.Thread] = []

    def task() -> int:
        task_threads.append(threading.current_thread())
        return 42

    def on_success(value: int) -> None:
        threads.append(threading.current_thread())
        results.append(value)

    runner.submit(task, on_success, lambda exc: results.append(exc))
    wait_until_idle(qt_app, runner)
    assert results == [42]
    assert threads == [threading.main_thread()]
    assert task_threads[0] is not threading.main_thread()


def test_error_is_delivered(qt_app) -> None:
    runner = QtTaskRunner()
    errors: List[FreightAPIError] = []

    def task() -> None:
        raise FreightAPIError("down", status_code=503)

    runner.submit(task, lambda value: None, errors.append)
    wait_until_idle(qt_app, runner)
    assert len(errors) == 1
    assert errors[0].status_code == 503


def test_shutdown_blocks_until_threads_finish(qt_app) -> None:
    runner = QtTaskRunner()
    runner.submit(lambda: time.sleep(0.05), lambda value: None, lambda exc: None)
    runner.shutdown(block=True)
    assert runner.active_count == 0


def test_unexpected_error_is_delivered_as_api_error(qt_app) -> None:
    runner = QtTaskRunner()
    successes: List[Any] = []
    errors: List[FreightAPIError] = []

    def task() -> None:
        raise KeyError("containerAttachments")

    runner.submit(task, successes.append, errors.append)
    wait_until_idle(qt_app, runner)
    assert successes == []
    assert len(errors) == 1
    assert isinstance(errors[0].__cause__, KeyError)

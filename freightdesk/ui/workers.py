"""Background execution of remote calls for the GUI."""

from __future__ import annotations

from typing import Any, Callable, Set

from PySide6 import QtCore

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.tasks import ErrorCallback, SuccessCallback, as_task_error


class TaskThread(QtCore.QThread):
    """Runs one callable off the GUI thread and reports the outcome by signal."""

    succeeded = QtCore.Signal(object)
    failed = QtCore.Signal(object)

    def __init__(self, task: Callable[[], Any]) -> None:
        super().__init__()
        self._task = task

    def run(self) -> None:
        if self.isInterruptionRequested():
            return
        try:
            result = self._task()
        except Exception as exc:
            self.failed.emit(as_task_error(exc))
            return
        if self.isInterruptionRequested():
            return
        self.succeeded.emit(result)


class _TaskHandle(QtCore.QObject):
    """Lives on the GUI thread so the thread's signals arrive through a queued connection."""

    def __init__(
        self,
        thread: TaskThread,
        on_success: SuccessCallback[Any],
        on_error: ErrorCallback,
        on_finished: Callable[["_TaskHandle"], None],
        parent: QtCore.QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.thread_ = thread
        self._on_success = on_success
        self._on_error = on_error
        self._on_finished = on_finished

    @QtCore.Slot(object)
    def deliver_success(self, result: Any) -> None:
        self._on_success(result)

    @QtCore.Slot(object)
    def deliver_error(self, exc: FreightAPIError) -> None:
        self._on_error(exc)

    @QtCore.Slot()
    def deliver_finished(self) -> None:
        self._on_finished(self)


class QtTaskRunner(QtCore.QObject):
    """TaskRunner backed by one QThread per task; callbacks run on the GUI thread."""

    def __init__(self, parent: QtCore.QObject | None = None) -> None:
        super().__init__(parent)
        self._handles: Set[_TaskHandle] = set()

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def submit(
        self,
        task: Callable[[], Any],
        on_success: SuccessCallback[Any],
        on_error: ErrorCallback,
    ) -> None:
        thread = TaskThread(task)
        handle = _TaskHandle(thread, on_success, on_error, self._release, parent=self)
        thread.succeeded.connect(handle.deliver_success)
        thread.failed.connect(handle.deliver_error)
        thread.finished.connect(handle.deliver_finished)
        self._handles.add(handle)
        thread.start()

    def shutdown(self, *, block: bool = False) -> None:
        """Asks running tasks to drop their results; optionally waits for the threads."""

        for handle in list(self._handles):
            handle.thread_.requestInterruption()
            if block:
                handle.thread_.wait()
        if block:
            for handle in list(self._handles):
                self._release(handle)

    def _release(self, handle: _TaskHandle) -> None:
        if handle not in self._handles:
            return
        self._handles.discard(handle)
        handle.thread_.deleteLater()
        handle.deleteLater()

"""Task runners: how remote calls are executed and how their results come back."""

from __future__ import annotations

import logging
from typing import Callable, Protocol, TypeVar

from freightdesk.api.exceptions import FreightAPIError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

SuccessCallback = Callable[[T], None]
ErrorCallback = Callable[[FreightAPIError], None]


class TaskRunner(Protocol):
    """Runs ``task`` and reports its outcome through exactly one of the callbacks.

    Implementations must invoke the callbacks on the thread that owns the
    caller's state (the GUI thread for the desktop shell).
    """

    def submit(
        self,
        task: Callable[[], T],
        on_success: SuccessCallback[T],
        on_error: ErrorCallback,
    ) -> None:  # pragma: no cover - protocol
        ...


def as_task_error(exc: Exception) -> FreightAPIError:
    """Returns ``exc`` when it is already an API error, otherwise wraps it."""

    if isinstance(exc, FreightAPIError):
        return exc
    LOGGER.exception("Unexpected error in background task")
    error = FreightAPIError(f"Unexpected error: {exc}")
    error.__cause__ = exc
    return error


class ImmediateTaskRunner:
    """Runs tasks synchronously on the calling thread."""

    def submit(
        self,
        task: Callable[[], T],
        on_success: SuccessCallback[T],
        on_error: ErrorCallback,
    ) -> None:
        try:
            result = task()
        except Exception as exc:
            on_error(as_task_error(exc))
            return
        on_success(result)

"""ImmediateTaskRunner reports every outcome through one callback."""

from __future__ import annotations

from typing import Any, List

import pytest

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.tasks import ImmediateTaskRunner, as_task_error


def test_success_goes_to_on_success() -> None:
    outcomes: List[Any] = []
    ImmediateTaskRunner().submit(lambda: 7, outcomes.append, outcomes.append)
    assert outcomes == [7]


def test_api_error_is_passed_through() -> None:
    error = FreightAPIError("down", status_code=503)
    outcomes: List[Any] = []

    def task() -> None:
        raise error

    ImmediateTaskRunner().submit(task, outcomes.append, outcomes.append)
    assert outcomes == [error]


def test_unexpected_error_is_wrapped(caplog: pytest.LogCaptureFixture) -> None:
    successes: List[Any] = []
    errors: List[FreightAPIError] = []

    def task() -> None:
        raise TypeError("'int' object is not iterable")

    ImmediateTaskRunner().submit(task, successes.append, errors.append)
    assert successes == []
    assert len(errors) == 1
    assert isinstance(errors[0].__cause__, TypeError)
    assert "not iterable" in str(errors[0])
    assert "Unexpected error in background task" in caplog.text


def test_as_task_error_keeps_api_errors() -> None:
    error = FreightAPIError("bad gateway", status_code=502)
    assert as_task_error(error) is error

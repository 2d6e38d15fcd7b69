"""Debounced SearchController."""

from __future__ import annotations

from typing import Any, List

import pytest
from PySide6 import QtTest

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import SearchResult
from freightdesk.search.controller import SearchController
from freightdesk.settings.registry import SettingsRegistry


class FakeSearchSource:
    def __init__(self) -> None:
        self.queries: List[str] = []
        self.error: FreightAPIError | None = None

    def search_shipments(self, query: str) -> List[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return [SearchResult(id="1", reference=f"{query}-1", type="Trucking", status="pending")]


class DeferredTaskRunner:
    def __init__(self) -> None:
        self.pending: List[Any] = []

    def submit(self, task, on_success, on_error) -> None:
        self.pending.append((task, on_success, on_error))

    def run(self, index: int) -> None:
        task, on_success, on_error = self.pending.pop(index)
        try:
            result = task()
        except FreightAPIError as exc:
            on_error(exc)
            return
        on_success(result)


class SignalRecorder:
    def __init__(self, controller: SearchController) -> None:
        self.results: List[List[SearchResult]] = []
        self.cleared = 0
        self.busy: List[bool] = []
        self.failures: List[str] = []
        controller.results_ready.connect(self.results.append)
        controller.results_cleared.connect(self._on_cleared)
        controller.busy_changed.connect(self.busy.append)
        controller.search_failed.connect(self.failures.append)

    def _on_cleared(self) -> None:
        self.cleared += 1


@pytest.fixture
def source() -> FakeSearchSource:
    return FakeSearchSource()


@pytest.fixture
def controller(qt_app, source: FakeSearchSource) -> SearchController:
    return SearchController(source)


def test_short_query_issues_no_request(controller: SearchController, source: FakeSearchSource) -> None:
    recorder = SignalRecorder(controller)
    controller.set_query("AB")
    assert controller.pending
    controller.flush()
    assert source.queries == []
    assert recorder.cleared == 1


def test_query_is_sent_after_idle_interval(
    controller: SearchController, source: FakeSearchSource
) -> None:
    recorder = SignalRecorder(controller)
    controller.set_query("ABC")
    assert controller.pending
    assert controller.debounce_ms == 300
    assert source.queries == []
    controller.flush()
    assert not controller.pending
    assert source.queries == ["ABC"]
    assert recorder.results[-1][0].reference == "ABC-1"
    assert controller.results[0].reference == "ABC-1"
    assert recorder.busy == [True, False]


def wait_for_queries(source: FakeSearchSource, timeout_ms: int = 2000) -> None:
    waited = 0
    while not source.queries and waited < timeout_ms:
        QtTest.QTest.qWait(10)
        waited += 10


def test_debounce_timer_fires_after_idle_interval(
    controller: SearchController, source: FakeSearchSource
) -> None:
    controller.set_query("ABC")
    QtTest.QTest.qWait(150)
    assert source.queries == []

    controller.set_query("ABCD")
    QtTest.QTest.qWait(200)
    assert source.queries == []
    assert controller.pending

    wait_for_queries(source)
    assert source.queries == ["ABCD"]
    assert not controller.pending
    QtTest.QTest.qWait(350)
    assert source.queries == ["ABCD"]


def test_rapid_typing_sends_only_last_query(
    controller: SearchController, source: FakeSearchSource
) -> None:
    for text in ("A", "AB", "ABC", "ABCD", "ABCDE"):
        controller.set_query(text)
    controller.flush()
    assert source.queries == ["ABCDE"]


def test_flush_without_pending_search_does_nothing(
    controller: SearchController, source: FakeSearchSource
) -> None:
    controller.flush()
    assert source.queries == []


def test_submit_searches_immediately(controller: SearchController, source: FakeSearchSource) -> None:
    controller.set_query("ABC")
    controller.submit()
    assert not controller.pending
    assert source.queries == ["ABC"]


def test_submit_ignores_short_query(controller: SearchController, source: FakeSearchSource) -> None:
    controller.set_query("AB")
    controller.submit()
    assert source.queries == []


def test_stale_results_are_dropped(qt_app, source: FakeSearchSource) -> None:
    runner = DeferredTaskRunner()
    controller = SearchController(source, runner)
    recorder = SignalRecorder(controller)
    controller.set_query("ABC")
    controller.flush()
    controller.set_query("ABCD")
    controller.flush()
    assert controller.busy

    runner.run(1)
    runner.run(0)
    assert [results[0].reference for results in recorder.results] == ["ABCD-1"]
    assert controller.results[0].reference == "ABCD-1"
    assert not controller.busy
    assert recorder.busy == [True, False]


def test_shortening_query_clears_results(
    controller: SearchController, source: FakeSearchSource
) -> None:
    recorder = SignalRecorder(controller)
    controller.set_query("ABC")
    controller.flush()
    controller.set_query("AB")
    controller.flush()
    assert controller.results == []
    assert recorder.cleared == 1


def test_failure_is_signalled_and_keeps_results(
    controller: SearchController, source: FakeSearchSource
) -> None:
    recorder = SignalRecorder(controller)
    controller.set_query("ABC")
    controller.flush()
    source.error = FreightAPIError("search backend down", status_code=503)
    controller.set_query("ABCD")
    controller.flush()
    assert recorder.failures == ["search backend down"]
    assert controller.results[0].reference == "ABC-1"
    assert not controller.busy


def test_clear_resets_state(controller: SearchController, source: FakeSearchSource) -> None:
    controller.set_query("ABC")
    controller.flush()
    controller.set_query("ABCD")
    controller.clear()
    assert not controller.pending
    assert controller.query == ""
    assert controller.results == []


def test_from_settings(qt_app, registry: SettingsRegistry, source: FakeSearchSource) -> None:
    registry.set_value("search", "debounce_ms", 150)
    registry.set_value("search", "min_query_length", 5)
    controller = SearchController.from_settings(source, registry)
    assert controller.debounce_ms == 150
    controller.set_query("ABCD")
    controller.flush()
    assert source.queries == []

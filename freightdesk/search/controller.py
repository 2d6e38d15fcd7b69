"""Debounced search over the shipment index.

Keystrokes restart a single-shot timer; when it fires, a query of at least
``min_length`` characters is sent through the task runner, shorter ones
clear the results. Results of a query that is no longer the latest one sent
are dropped.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import List, Optional, Protocol

from PySide6 import QtCore

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import SearchResult
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.tasks import ImmediateTaskRunner, TaskRunner

LOGGER = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 300
DEFAULT_MIN_LENGTH = 3


class SearchSource(Protocol):
    def search_shipments(self, query: str) -> List[SearchResult]:  # pragma: no cover - protocol
        ...


class SearchController(QtCore.QObject):
    results_ready = QtCore.Signal(list)
    results_cleared = QtCore.Signal()
    busy_changed = QtCore.Signal(bool)
    search_failed = QtCore.Signal(str)

    def __init__(
        self,
        source: SearchSource,
        runner: TaskRunner | None = None,
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        min_length: int = DEFAULT_MIN_LENGTH,
        parent: QtCore.QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._source = source
        self._runner: TaskRunner = runner or ImmediateTaskRunner()
        self._min_length = min_length
        self._query = ""
        self._last_sent: Optional[str] = None
        self._results: List[SearchResult] = []
        self._requests_in_flight = 0
        self._timer = QtCore.QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(debounce_ms)
        self._timer.timeout.connect(self._on_debounce_timeout)

    @classmethod
    def from_settings(
        cls,
        source: SearchSource,
        settings: SettingsRegistry,
        runner: TaskRunner | None = None,
        parent: QtCore.QObject | None = None,
    ) -> "SearchController":
        return cls(
            source,
            runner,
            debounce_ms=int(
                settings.get_value("search", "debounce_ms", default=DEFAULT_DEBOUNCE_MS)
            ),
            min_length=int(
                settings.get_value("search", "min_query_length", default=DEFAULT_MIN_LENGTH)
            ),
            parent=parent,
        )

    # ------------------------------------------------------------------ state
    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> List[SearchResult]:
        return list(self._results)

    @property
    def busy(self) -> bool:
        return self._requests_in_flight > 0

    @property
    def pending(self) -> bool:
        """True while a debounced search is waiting for the timer."""

        return self._timer.isActive()

    @property
    def debounce_ms(self) -> int:
        return self._timer.interval()

    # -------------------------------------------------------------------- api
    def set_query(self, text: str) -> None:
        self._query = text
        self._timer.start()

    def submit(self) -> None:
        """Searches right away, as on pressing Enter."""

        self._timer.stop()
        if len(self._query) >= self._min_length:
            self._send(self._query)

    def flush(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._on_debounce_timeout()

    def clear(self) -> None:
        self._timer.stop()
        self._query = ""
        self._last_sent = None
        self._clear_results()

    # ---------------------------------------------------------------- helpers
    def _on_debounce_timeout(self) -> None:
        if len(self._query) >= self._min_length:
            self._send(self._query)
        else:
            self._last_sent = None
            self._clear_results()

    def _send(self, query: str) -> None:
        self._last_sent = query
        self._requests_in_flight += 1
        if self._requests_in_flight == 1:
            self.busy_changed.emit(True)
        LOGGER.debug("Searching shipments for %r", query)
        self._runner.submit(
            partial(self._source.search_shipments, query),
            partial(self._on_results, query),
            partial(self._on_failed, query),
        )

    def _finish_request(self) -> None:
        self._requests_in_flight -= 1
        if self._requests_in_flight == 0:
            self.busy_changed.emit(False)

    def _on_results(self, query: str, results: List[SearchResult]) -> None:
        self._finish_request()
        if query != self._last_sent:
            LOGGER.debug("Dropping stale results for %r", query)
            return
        self._results = list(results)
        self.results_ready.emit(list(self._results))

    def _on_failed(self, query: str, exc: FreightAPIError) -> None:
        self._finish_request()
        LOGGER.error("Search error for %r: %s", query, exc)
        if query == self._last_sent:
            self.search_failed.emit(str(exc))

    def _clear_results(self) -> None:
        self._results = []
        self.results_cleared.emit()

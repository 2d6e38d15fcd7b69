"""Search field with a drop-down list of shipment hits."""

from __future__ import annotations

from typing import List

from PySide6 import QtCore, QtWidgets

from freightdesk.api.models import SearchResult
from freightdesk.i18n.translator import translate
from freightdesk.search.controller import SearchController

RESULT_ROLE = QtCore.Qt.ItemDataRole.UserRole


def format_result(result: SearchResult) -> str:
    parts = [result.reference, result.type, result.status]
    if result.customer:
        parts.append(result.customer)
    if result.container_number and result.container_number != result.reference:
        parts.append(result.container_number)
    return " | ".join(parts)


class SearchBar(QtWidgets.QWidget):
    """Feeds keystrokes to a SearchController and lists what it returns."""

    result_activated = QtCore.Signal(object)

    def __init__(
        self, controller: SearchController, parent: QtWidgets.QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        row = QtWidgets.QHBoxLayout()
        self._input = QtWidgets.QLineEdit()
        self._input.setPlaceholderText(translate("search.placeholder"))
        self._input.setClearButtonEnabled(True)
        row.addWidget(self._input, stretch=1)
        self._status_label = QtWidgets.QLabel()
        row.addWidget(self._status_label)
        layout.addLayout(row)

        self._results = QtWidgets.QListWidget()
        self._results.setVisible(False)
        self._results.setMaximumHeight(220)
        layout.addWidget(self._results)

        self._input.textChanged.connect(controller.set_query)
        self._input.returnPressed.connect(controller.submit)
        self._results.itemActivated.connect(self._on_item_activated)
        controller.results_ready.connect(self._show_results)
        controller.results_cleared.connect(self._hide_results)
        controller.busy_changed.connect(self._on_busy_changed)
        controller.search_failed.connect(self._on_failed)

    @property
    def line_edit(self) -> QtWidgets.QLineEdit:
        return self._input

    @property
    def results_list(self) -> QtWidgets.QListWidget:
        return self._results

    @property
    def status_text(self) -> str:
        return self._status_label.text()

    def _show_results(self, results: List[SearchResult]) -> None:
        self._results.clear()
        self._status_label.clear()
        if not results:
            self._results.addItem(translate("search.no_results"))
            self._results.item(0).setFlags(QtCore.Qt.ItemFlag.NoItemFlags)
        for result in results:
            item = QtWidgets.QListWidgetItem(format_result(result))
            item.setData(RESULT_ROLE, result)
            self._results.addItem(item)
        self._results.setVisible(True)

    def _hide_results(self) -> None:
        self._results.clear()
        self._results.setVisible(False)
        self._status_label.clear()

    def _on_busy_changed(self, busy: bool) -> None:
        self._status_label.setText(translate("search.searching") if busy else "")

    def _on_failed(self, message: str) -> None:
        self._status_label.setText(translate("search.failed", message=message))

    def _on_item_activated(self, item: QtWidgets.QListWidgetItem) -> None:
        result = item.data(RESULT_ROLE)
        if isinstance(result, SearchResult):
            self._results.setVisible(False)
            self.result_activated.emit(result)

"""Pager under the container table."""

from __future__ import annotations

from typing import List

from PySide6 import QtCore, QtWidgets

from freightdesk.containers.pagination import PageView, page_window
from freightdesk.i18n.translator import translate
from freightdesk.settings.groups import PAGE_SIZE_OPTIONS


class PaginationBar(QtWidgets.QWidget):
    page_requested = QtCore.Signal(int)
    page_size_requested = QtCore.Signal(int)

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self._view: PageView | None = None
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(8, 2, 8, 2)

        layout.addWidget(QtWidgets.QLabel(translate("pager.rows_per_page")))
        self._size_combo = QtWidgets.QComboBox()
        for option in PAGE_SIZE_OPTIONS:
            self._size_combo.addItem(str(option), option)
        self._size_combo.currentIndexChanged.connect(self._on_size_changed)
        layout.addWidget(self._size_combo)

        self._showing_label = QtWidgets.QLabel()
        layout.addWidget(self._showing_label)
        layout.addStretch()

        self._first_button = self._nav_button("«", "pager.first")
        self._previous_button = self._nav_button("‹", "pager.previous")
        layout.addWidget(self._first_button)
        layout.addWidget(self._previous_button)

        self._numbers_layout = QtWidgets.QHBoxLayout()
        self._numbers_layout.setSpacing(2)
        layout.addLayout(self._numbers_layout)
        self._number_buttons: List[QtWidgets.QToolButton] = []

        self._next_button = self._nav_button("›", "pager.next")
        self._last_button = self._nav_button("»", "pager.last")
        layout.addWidget(self._next_button)
        layout.addWidget(self._last_button)

        self._first_button.clicked.connect(lambda: self.page_requested.emit(1))
        self._previous_button.clicked.connect(lambda: self._request_relative(-1))
        self._next_button.clicked.connect(lambda: self._request_relative(1))
        self._last_button.clicked.connect(self._request_last)

    @staticmethod
    def _nav_button(text: str, tooltip_key: str) -> QtWidgets.QToolButton:
        button = QtWidgets.QToolButton()
        button.setText(text)
        button.setToolTip(translate(tooltip_key))
        return button

    @property
    def showing_text(self) -> str:
        return self._showing_label.text()

    def page_numbers(self) -> List[int]:
        return [int(button.text()) for button in self._number_buttons]

    def update_view(self, view: PageView) -> None:
        self._view = view
        self._size_combo.blockSignals(True)
        index = self._size_combo.findData(view.page_size)
        if index < 0:
            self._size_combo.addItem(str(view.page_size), view.page_size)
            index = self._size_combo.count() - 1
        self._size_combo.setCurrentIndex(index)
        self._size_combo.blockSignals(False)

        self._showing_label.setText(
            translate(
                "pager.showing",
                first=view.first_item,
                last=view.last_item,
                total=view.total_items,
            )
        )
        self._first_button.setEnabled(view.has_previous)
        self._previous_button.setEnabled(view.has_previous)
        self._next_button.setEnabled(view.has_next)
        self._last_button.setEnabled(view.has_next)
        self._rebuild_numbers(view)

    def _rebuild_numbers(self, view: PageView) -> None:
        for button in self._number_buttons:
            self._numbers_layout.removeWidget(button)
            button.deleteLater()
        self._number_buttons = []
        for number in page_window(view.current_page, view.total_pages):
            button = QtWidgets.QToolButton()
            button.setText(str(number))
            button.setCheckable(True)
            button.setChecked(number == view.current_page)
            button.setToolTip(translate("pager.page_of", page=number, pages=view.total_pages))
            button.clicked.connect(lambda _checked=False, page=number: self.page_requested.emit(page))
            self._numbers_layout.addWidget(button)
            self._number_buttons.append(button)

    def _request_relative(self, step: int) -> None:
        if self._view is None:
            return
        target = self._view.current_page + step
        if 1 <= target <= max(self._view.total_pages, 1):
            self.page_requested.emit(target)

    def _request_last(self) -> None:
        if self._view is not None and self._view.total_pages > 0:
            self.page_requested.emit(self._view.total_pages)

    def _on_size_changed(self, index: int) -> None:
        size = self._size_combo.itemData(index)
        if isinstance(size, int):
            self.page_size_requested.emit(size)

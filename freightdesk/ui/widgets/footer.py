"""Bottom bar with load counters and the live-update indicator."""

from __future__ import annotations

from PySide6 import QtWidgets

from freightdesk.i18n.translator import translate


class FooterWidget(QtWidgets.QWidget):
    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(24)

        self._loaded_label = QtWidgets.QLabel(translate("footer.loaded", count=0))
        layout.addWidget(self._loaded_label)

        self._details_label = QtWidgets.QLabel(translate("footer.details_loaded", count=0))
        layout.addWidget(self._details_label)
        layout.addStretch()

        self._realtime_label = QtWidgets.QLabel(translate("footer.realtime_off"))
        layout.addWidget(self._realtime_label)

    def update_counts(self, *, loaded: int, details: int) -> None:
        self._loaded_label.setText(translate("footer.loaded", count=loaded))
        self._details_label.setText(translate("footer.details_loaded", count=details))

    def update_realtime_status(self, enabled: bool) -> None:
        key = "footer.realtime_on" if enabled else "footer.realtime_off"
        self._realtime_label.setText(translate(key))

    @property
    def loaded_text(self) -> str:
        return self._loaded_label.text()

    @property
    def realtime_text(self) -> str:
        return self._realtime_label.text()

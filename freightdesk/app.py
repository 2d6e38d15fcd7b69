"""Creation and start of the FreightDesk GUI application."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PySide6 import QtWidgets

from freightdesk import __version__
from freightdesk.api.data_provider import FreightDataProvider
from freightdesk.containers.store import DEFAULT_PAGE_SIZE, ContainerStore
from freightdesk.i18n.translator import set_language
from freightdesk.realtime.channel import UpdateChannel
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.ui.main_window import create_main_window
from freightdesk.ui.workers import QtTaskRunner


class RunnableApp(Protocol):
    def run(self) -> int:  # pragma: no cover - protocol
        """Runs the event loop and returns the exit code."""


@dataclass
class GUIApp:
    """PySide6 application wiring the store, the runner and the main window."""

    settings: SettingsRegistry
    data_provider: FreightDataProvider
    channel: UpdateChannel

    def __post_init__(self) -> None:
        self._qt_app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
        self._qt_app.setApplicationName("FreightDesk")
        self._qt_app.setApplicationVersion(__version__)
        set_language(self.settings.get_value("app", "language", default="en"))
        runner = QtTaskRunner()
        self.store = ContainerStore(
            self.data_provider,
            runner,
            page_size=int(
                self.settings.get_value("containers", "page_size", default=DEFAULT_PAGE_SIZE)
            ),
        )
        self._window = create_main_window(
            settings=self.settings,
            data_provider=self.data_provider,
            store=self.store,
            channel=self.channel,
            runner=runner,
        )

    def run(self) -> int:
        self._window.show()
        return self._qt_app.exec()


def create_application(
    settings: SettingsRegistry,
    data_provider: FreightDataProvider,
    channel: UpdateChannel,
) -> RunnableApp:
    return GUIApp(settings=settings, data_provider=data_provider, channel=channel)

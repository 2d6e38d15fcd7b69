"""Main window: container table, search, pager and live updates."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Sequence

from PySide6 import QtCore, QtGui, QtWidgets

from freightdesk.api.data_provider import FreightDataProvider
from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import SearchResult
from freightdesk.containers.models import Container
from freightdesk.containers.store import ContainerStore
from freightdesk.i18n.translator import translate
from freightdesk.realtime.channel import UpdateChannel, diff_container_updates
from freightdesk.search.controller import SearchController
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.ui.widgets.containers_table import ContainerTable
from freightdesk.ui.widgets.footer import FooterWidget
from freightdesk.ui.widgets.pagination_bar import PaginationBar
from freightdesk.ui.widgets.search_bar import SearchBar
from freightdesk.ui.workers import QtTaskRunner

TABLE_STATE_ID = "containers"
MAX_COLUMN_WIDTH = 5000


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        *,
        settings: SettingsRegistry,
        data_provider: FreightDataProvider,
        store: ContainerStore,
        channel: UpdateChannel,
        runner: QtTaskRunner,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._provider = data_provider
        self._store = store
        self._channel = channel
        self._runner = runner
        self._runner.setParent(self)
        self._last_loaded_at: datetime | None = None
        self._was_loading = False
        self._poll_in_progress = False

        self._search = SearchController.from_settings(data_provider, settings, runner, parent=self)
        self._search_bar = SearchBar(self._search)
        self._reload_button = QtWidgets.QPushButton(translate("actions.reload"))
        self._reload_button.setToolTip(translate("actions.reload_tooltip"))
        self._table = ContainerTable()
        self._pager = PaginationBar()
        self._footer = FooterWidget()
        self._status_label = QtWidgets.QLabel()

        self._poll_timer = QtCore.QTimer(self)
        self._poll_timer.timeout.connect(self._poll_for_updates)
        self._drain_timer = QtCore.QTimer(self)
        self._drain_timer.timeout.connect(self._drain_updates)

        self._setup_window()
        self._apply_initial_window_state()
        self._create_menu_bar()
        self.statusBar().addPermanentWidget(self._status_label)
        self._connect_signals()
        self._init_table_state()

        self._store.register_observer(self)
        self._store.attach_channel(self._channel)
        self.on_store_changed(self._store)
        if self._settings.get_value("containers", "load_on_startup", default=True):
            self._store.load()
        self._start_realtime()

    # ------------------------------------------------------------------- setup
    def _setup_window(self) -> None:
        self.setWindowTitle(translate("app.title"))
        central = QtWidgets.QWidget()
        root_layout = QtWidgets.QVBoxLayout(central)

        top_panel = QtWidgets.QWidget()
        top_layout = QtWidgets.QHBoxLayout(top_panel)
        top_layout.setContentsMargins(0, 0, 0, 0)
        top_layout.addWidget(self._search_bar, stretch=1)
        top_layout.addWidget(self._reload_button, alignment=QtCore.Qt.AlignmentFlag.AlignTop)

        root_layout.addWidget(top_panel)
        root_layout.addWidget(self._table, stretch=1)
        root_layout.addWidget(self._pager)
        root_layout.addWidget(self._footer)
        self.setCentralWidget(central)

    def _apply_initial_window_state(self) -> None:
        if self._settings.get_value("app", "window_maximized", default=False):
            self.setWindowState(QtCore.Qt.WindowState.WindowMaximized)
            return
        width = int(self._settings.get_value("app", "window_width", default=1440))
        height = int(self._settings.get_value("app", "window_height", default=900))
        self.resize(width, height)

    def _create_menu_bar(self) -> None:
        file_menu = self.menuBar().addMenu(translate("menu.file"))
        reload_action = file_menu.addAction(translate("actions.reload"))
        reload_action.setShortcut(QtGui.QKeySequence(QtGui.QKeySequence.StandardKey.Refresh))
        reload_action.triggered.connect(self._store.reload)
        self.addAction(reload_action)
        exit_action = file_menu.addAction(translate("actions.exit"))
        exit_action.setShortcut(QtGui.QKeySequence(QtGui.QKeySequence.StandardKey.Quit))
        exit_action.triggered.connect(self.close)
        self.addAction(exit_action)

    def _connect_signals(self) -> None:
        self._reload_button.clicked.connect(self._store.reload)
        self._table.toggle_requested.connect(self._store.toggle_expand)
        self._table.retry_requested.connect(self._store.retry_details)
        self._pager.page_requested.connect(self._store.set_current_page)
        self._pager.page_size_requested.connect(self._on_page_size_requested)
        self._search_bar.result_activated.connect(self._on_search_result_activated)

    def _init_table_state(self) -> None:
        widths = self._get_saved_column_widths()
        if widths:
            self._table.apply_column_widths(widths)
        self._table.tree.header().sectionResized.connect(
            lambda *_args: self._save_column_widths()
        )

    def _get_saved_column_widths(self) -> List[int]:
        state = self._settings.get_value("ui_state", "column_widths", default={})
        if isinstance(state, dict):
            raw_widths = state.get(TABLE_STATE_ID)
            if isinstance(raw_widths, list):
                try:
                    return [int(value) for value in raw_widths]
                except (TypeError, ValueError):
                    return []
        return []

    def _save_column_widths(self) -> None:
        state = dict(self._settings.get_value("ui_state", "column_widths", default={}))
        state[TABLE_STATE_ID] = [min(width, MAX_COLUMN_WIDTH) for width in self._table.column_widths()]
        self._settings.set_value("ui_state", "column_widths", state)

    # --------------------------------------------------------------- rendering
    def on_store_changed(self, store: ContainerStore) -> None:
        if store.loading:
            self._table.show_placeholder(translate("containers.loading"))
            self._status_label.setText(translate("status.loading"))
            self._reload_button.setEnabled(False)
        elif store.error:
            self._table.show_placeholder(store.error)
            self._status_label.setText(translate("status.error"))
            self._reload_button.setEnabled(True)
        else:
            self._table.set_containers(store.paginated_containers, store.expanded_ids)
            self._reload_button.setEnabled(True)
            self._update_loaded_label()
        self._pager.update_view(store.pagination)
        self._footer.update_counts(loaded=len(store.containers), details=len(store.fetched_ids))
        self._was_loading = store.loading

    def _update_loaded_label(self) -> None:
        if self._was_loading:
            self._last_loaded_at = datetime.now()
        if self._last_loaded_at is None:
            self._status_label.clear()
            return
        timestamp = self._last_loaded_at.strftime("%H:%M:%S %d/%m/%y")
        self._status_label.setText(translate("status.loaded", timestamp=timestamp))

    # ----------------------------------------------------------------- actions
    def _on_page_size_requested(self, size: int) -> None:
        self._store.set_page_size(size)
        self._settings.set_value("containers", "page_size", size)

    def _on_search_result_activated(self, result: SearchResult) -> None:
        number = result.container_number or result.reference
        container = self._store.find_by_number(number)
        if container is None:
            self.statusBar().showMessage(translate("search.no_results"), 5000)
            return
        self._store.reveal(container.id)

    # ---------------------------------------------------------------- realtime
    def _start_realtime(self) -> None:
        enabled = bool(self._settings.get_value("realtime", "enabled", default=True))
        self._footer.update_realtime_status(enabled)
        if not enabled:
            return
        self._poll_timer.start(
            int(self._settings.get_value("realtime", "poll_interval_ms", default=30000))
        )
        self._drain_timer.start(
            int(self._settings.get_value("realtime", "drain_interval_ms", default=500))
        )

    def _poll_for_updates(self) -> None:
        if self._poll_in_progress or self._store.loading:
            return
        self._poll_in_progress = True
        self._runner.submit(
            self._provider.fetch_containers,
            self._on_poll_result,
            self._on_poll_failed,
        )

    def _on_poll_result(self, fresh: Sequence[Container]) -> None:
        self._poll_in_progress = False
        updates = diff_container_updates(self._store.containers, fresh)
        for update in updates:
            self._channel.publish(update)
        if updates:
            self._logger.info("Published %d container updates", len(updates))

    def _on_poll_failed(self, exc: FreightAPIError) -> None:
        self._poll_in_progress = False
        self._logger.warning("Status poll failed: %s", exc)

    def _drain_updates(self) -> None:
        self._channel.drain()

    # ------------------------------------------------------------------ close
    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self._poll_timer.stop()
        self._drain_timer.stop()
        self._store.unregister_observer(self)
        self._store.close()
        self._channel.close()
        self._runner.shutdown(block=True)
        if self._settings.get_value("app", "save_window_state", default=True):
            window_state: Dict[str, Any] = {"window_maximized": self.isMaximized()}
            if not self.isMaximized():
                geometry = self.geometry()
                window_state["window_width"] = min(max(geometry.width(), 800), 10000)
                window_state["window_height"] = min(max(geometry.height(), 600), 10000)
            self._settings.update_group("app", window_state)
        self._settings.save_to_disk()
        super().closeEvent(event)


def create_main_window(
    *,
    settings: SettingsRegistry,
    data_provider: FreightDataProvider,
    store: ContainerStore,
    channel: UpdateChannel,
    runner: QtTaskRunner,
) -> MainWindow:
    return MainWindow(
        settings=settings,
        data_provider=data_provider,
        store=store,
        channel=channel,
        runner=runner,
    )

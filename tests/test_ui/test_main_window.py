"""MainWindow wiring against a fake data provider."""

from __future__ import annotations

import time
from dataclasses import replace
from types import SimpleNamespace
from typing import List

import pytest
from PySide6 import QtCore

from freightdesk.api.models import SearchResult
from freightdesk.containers.models import Container, ContainerDetails
from freightdesk.containers.store import ContainerStore
from freightdesk.realtime.channel import UpdateChannel
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.ui.main_window import MainWindow
from freightdesk.ui.workers import QtTaskRunner


class FakeProvider:
    def __init__(self) -> None:
        self.containers = [
            Container(id=f"C{index}", number=f"MSCU{index:07d}", status="In Transit")
            for index in range(1, 13)
        ]

    def fetch_containers(self) -> List[Container]:
        return list(self.containers)

    def fetch_container_details(self, container_number: str) -> ContainerDetails:
        return ContainerDetails(container_attachments=("bol.pdf",))

    def search_shipments(self, query: str) -> List[SearchResult]:
        return []


def process_until(qt_app, condition, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition() and time.monotonic() < deadline:
        qt_app.processEvents(QtCore.QEventLoop.ProcessEventsFlag.AllEvents, 50)
        time.sleep(0.01)
    assert condition()


@pytest.fixture
def harness(qt_app, registry: SettingsRegistry):
    registry.set_value("realtime", "enabled", False)
    provider = FakeProvider()
    runner = QtTaskRunner()
    store = ContainerStore(provider, runner)
    channel = UpdateChannel()
    main_window = MainWindow(
        settings=registry,
        data_provider=provider,  # type: ignore[arg-type]
        store=store,
        channel=channel,
        runner=runner,
    )
    main_window.show()
    process_until(qt_app, lambda: not store.loading)
    yield SimpleNamespace(
        window=main_window, provider=provider, store=store, channel=channel
    )
    main_window.close()


def test_first_page_is_rendered(harness) -> None:
    window = harness.window
    assert window._table.tree.topLevelItemCount() == 10
    assert window._pager.showing_text == "Showing 1 to 10 of 12"
    assert window._footer.loaded_text == "12 containers loaded"
    assert window._footer.realtime_text == "Live updates: off"


def test_expand_loads_details(qt_app, harness) -> None:
    tree = harness.window._table.tree
    tree.topLevelItem(0).setExpanded(True)
    process_until(qt_app, lambda: "C1" in harness.store.fetched_ids)
    item = tree.topLevelItem(0)
    assert item.isExpanded()
    assert any(item.child(i).text(0) == "Attachments: 1" for i in range(item.childCount()))


def test_poll_result_is_applied_through_channel(harness) -> None:
    containers = harness.provider.containers
    fresh = [replace(containers[0], status="Available")] + containers[1:]
    harness.window._on_poll_result(fresh)
    assert harness.store.get("C1").status == "In Transit"
    harness.window._drain_updates()
    assert harness.store.get("C1").status == "Available"


def test_page_size_change_is_saved(harness, registry: SettingsRegistry) -> None:
    harness.window._pager.page_size_requested.emit(25)
    assert registry.get_value("containers", "page_size") == 25
    assert harness.window._table.tree.topLevelItemCount() == 12


def test_close_saves_settings_and_unsubscribes(harness, registry: SettingsRegistry) -> None:
    harness.window.close()
    assert registry.config_path.exists()
    assert harness.channel.closed


def test_close_saves_window_size_and_column_widths(harness, registry: SettingsRegistry) -> None:
    harness.window.resize(1024, 700)
    harness.window._table.tree.setColumnWidth(0, 180)
    harness.window.close()

    assert registry.get_value("app", "window_maximized") is False
    assert 800 <= registry.get_value("app", "window_width") <= 10000
    assert 600 <= registry.get_value("app", "window_height") <= 10000
    widths = registry.get_value("ui_state", "column_widths")["containers"]
    assert widths[0] == 180
    assert not registry.is_dirty

"""Settings observers."""

from __future__ import annotations

import logging
from typing import List, Tuple

import pytest

from freightdesk.settings.observers import (
    LoggingSettingsObserver,
    LogLevelObserver,
    SettingsObserver,
)
from freightdesk.settings.registry import SettingsRegistry


class RecordingObserver:
    def __init__(self) -> None:
        self.events: List[Tuple[str, str, object, object]] = []

    def on_setting_changed(self, group: str, key: str, old_value: object, new_value: object) -> None:
        self.events.append((group, key, old_value, new_value))


class BrokenObserver:
    def on_setting_changed(self, group: str, key: str, old_value: object, new_value: object) -> None:
        raise RuntimeError("observer failed")


def test_observers_satisfy_protocol() -> None:
    for observer in (LoggingSettingsObserver(), LogLevelObserver(), RecordingObserver()):
        assert isinstance(observer, SettingsObserver)


def test_update_group_notifies_once_per_changed_key(registry: SettingsRegistry) -> None:
    observer = RecordingObserver()
    registry.register_observer(observer)
    registry.update_group("realtime", {"enabled": False, "drain_interval_ms": 500})
    assert observer.events == [("realtime", "enabled", True, False)]


def test_unregistered_observer_hears_nothing(registry: SettingsRegistry) -> None:
    observer = RecordingObserver()
    registry.register_observer(observer)
    registry.unregister_observer(observer)
    registry.set_value("realtime", "enabled", False)
    assert observer.events == []


def test_broken_observer_is_logged_and_skipped(
    registry: SettingsRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    observer = RecordingObserver()
    registry.register_observer(BrokenObserver())
    registry.register_observer(observer)
    registry.set_value("search", "debounce_ms", 500)
    assert observer.events == [("search", "debounce_ms", 300, 500)]
    assert "failed on search.debounce_ms" in caplog.text


def test_logging_observer_writes_change(
    registry: SettingsRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level("INFO")
    registry.register_observer(LoggingSettingsObserver())
    registry.set_value("containers", "page_size", 100)
    assert "Setting changed: containers.page_size 10 -> 100" in caplog.text


def test_log_level_observer_applies_new_level(registry: SettingsRegistry) -> None:
    root = logging.getLogger()
    previous = root.level
    registry.register_observer(LogLevelObserver())
    try:
        registry.set_value("logging", "level", "ERROR")
        assert root.level == logging.ERROR
        registry.set_value("logging", "max_archived_files", 3)
        assert root.level == logging.ERROR
    finally:
        root.setLevel(previous)

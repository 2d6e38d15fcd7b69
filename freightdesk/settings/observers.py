"""Observers notified by SettingsRegistry after a value changes."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from freightdesk.utils.logger import set_log_level

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class SettingsObserver(Protocol):
    def on_setting_changed(self, group: str, key: str, old_value: object, new_value: object) -> None:
        ...


class LoggingSettingsObserver:
    """Audit trail of configuration changes."""

    def on_setting_changed(self, group: str, key: str, old_value: object, new_value: object) -> None:
        LOGGER.info("Setting changed: %s.%s %r -> %r", group, key, old_value, new_value)


class LogLevelObserver:
    """Applies ``logging.level`` to the root logger as soon as it is changed."""

    def on_setting_changed(self, group: str, key: str, old_value: object, new_value: object) -> None:
        if (group, key) == ("logging", "level") and isinstance(new_value, str):
            set_log_level(new_value)

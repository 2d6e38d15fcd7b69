"""Errors raised while reading, validating or writing config.json."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from freightdesk.exceptions import FreightDeskError

LOGGER = logging.getLogger(__name__)


class SettingsError(FreightDeskError):
    """Base class of configuration errors.

    ``group`` and ``key`` point at the offending setting when there is one.
    Every instance is logged when it is created, so callers that only show a
    message box do not lose the details.
    """

    def __init__(self, message: str, *, group: Optional[str] = None, key: Optional[str] = None) -> None:
        self.group = group
        self.key = key
        super().__init__(message)
        LOGGER.error("Settings error: %s", message)

    @property
    def qualified_key(self) -> str:
        if self.group and self.key:
            return f"{self.group}.{self.key}"
        return self.group or self.key or ""


class SettingsNotFoundError(SettingsError):
    def __init__(self, group: str, key: Optional[str] = None) -> None:
        what = f"setting '{group}.{key}'" if key else f"settings group '{group}'"
        super().__init__(f"Unknown {what}", group=group, key=key)


class SettingsValidationError(SettingsError):
    """A value was rejected by the validator registered for its key."""

    def __init__(self, group: str, key: str, value: Any, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value {value!r} for '{group}.{key}': {reason}",
            group=group,
            key=key,
        )


class SettingsMigrationError(SettingsError):
    """A migration step failed and config.json was restored from its backup."""

    def __init__(self, from_version: str, to_version: str, reason: str) -> None:
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(f"Cannot migrate config from {from_version} to {to_version}: {reason}")


class SettingsIOError(SettingsError):
    def __init__(self, path: Path, reason: str, *, operation: str = "read") -> None:
        self.path = path
        self.operation = operation
        super().__init__(f"Cannot {operation} settings file {path}: {reason}")

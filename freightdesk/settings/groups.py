"""Settings groups.

A group is a flat table of :class:`Field` entries. Each field has a default
and an optional validator. Values are stored as JSON-compatible data and
copied on the way in and out, so callers never share a mutable default.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from freightdesk.settings.exceptions import SettingsNotFoundError, SettingsValidationError
from freightdesk.settings.validators import (
    CompositeValidator,
    EnumValidator,
    MappingValidator,
    RangeValidator,
    RegexValidator,
    SequenceValidator,
    TypeValidator,
    UrlValidator,
    ValidationResult,
    Validator,
)

API_CODE_PATTERN = r"[A-Za-z0-9:_\-]*"
ENV_NAME_PATTERN = r"[A-Z_][A-Z0-9_]*"
PAGE_SIZE_OPTIONS: Tuple[int, ...] = (10, 25, 50, 100)
LANGUAGES: Tuple[str, ...] = ("en",)
LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True, slots=True)
class Field:
    default: Any
    validator: Optional[Validator] = None


class SettingsGroup:
    group_name: ClassVar[str] = ""
    fields: ClassVar[Mapping[str, Field]] = {}

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}
        self.reset_to_defaults()

    def keys(self) -> Tuple[str, ...]:
        return tuple(self.fields)

    def _field(self, key: str) -> Field:
        try:
            return self.fields[key]
        except KeyError:
            raise SettingsNotFoundError(self.group_name, key) from None

    def get(self, key: str) -> Any:
        self._field(key)
        return copy.deepcopy(self._values[key])

    def get_default(self, key: str) -> Any:
        return copy.deepcopy(self._field(key).default)

    def validate(self, key: str, value: Any) -> ValidationResult:
        validator = self._field(key).validator
        if validator is None:
            return ValidationResult.success()
        return validator.validate(value)

    def _checked(self, key: str, value: Any) -> Any:
        result = self.validate(key, value)
        if not result.ok:
            raise SettingsValidationError(self.group_name, key, value, result.reason)
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = self._checked(key, value)

    def update(self, values: Mapping[str, Any]) -> Dict[str, Tuple[Any, Any]]:
        """Sets several keys at once.

        Nothing is stored unless every value is valid. Returns
        ``{key: (old, new)}`` for the keys whose value actually changed.
        """

        checked = {key: self._checked(key, value) for key, value in values.items()}
        changes: Dict[str, Tuple[Any, Any]] = {}
        for key, value in checked.items():
            old_value = self._values[key]
            if old_value != value:
                changes[key] = (old_value, copy.deepcopy(value))
            self._values[key] = value
        return changes

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def from_dict(self, data: Mapping[str, Any]) -> None:
        """Loads the known keys of ``data``; unknown keys are dropped."""

        self.update({key: value for key, value in data.items() if key in self.fields})

    def reset_to_defaults(self) -> None:
        self._values = {key: copy.deepcopy(field.default) for key, field in self.fields.items()}

    @classmethod
    def defaults(cls) -> Dict[str, Any]:
        return {key: copy.deepcopy(field.default) for key, field in cls.fields.items()}


class AppSettings(SettingsGroup):
    group_name = "app"
    fields = {
        "language": Field("en", EnumValidator(LANGUAGES)),
        "window_width": Field(1440, RangeValidator(800, 10000)),
        "window_height": Field(900, RangeValidator(600, 10000)),
        "window_maximized": Field(False, TypeValidator(bool)),
        "save_window_state": Field(True, TypeValidator(bool)),
    }


class LoggingSettings(SettingsGroup):
    """Log level and rotation of freightdesk.log."""

    group_name = "logging"
    fields = {
        "enabled": Field(True, TypeValidator(bool)),
        "level": Field("INFO", EnumValidator(LOG_LEVELS)),
        "max_file_size_mb": Field(10, RangeValidator(1, 1000)),
        "max_archived_files": Field(5, RangeValidator(1, 50)),
    }


_API_CODE = RegexValidator(API_CODE_PATTERN)


class ApiSettings(SettingsGroup):
    """Backend location, API group codes and request timeout.

    The bearer token is never stored in config.json; ``token_env`` names the
    environment variable it is read from.
    """

    group_name = "api"
    fields = {
        "base_url": Field("https://api.freightdesk.local/api:", UrlValidator()),
        "containers_code": Field("containers", _API_CODE),
        "auth_code": Field("auth", _API_CODE),
        "timeout_sec": Field(15, RangeValidator(1, 120)),
        "token_env": Field("FREIGHTDESK_API_TOKEN", RegexValidator(ENV_NAME_PATTERN)),
    }


class ContainersSettings(SettingsGroup):
    group_name = "containers"
    fields = {
        "page_size": Field(10, EnumValidator(PAGE_SIZE_OPTIONS)),
        "load_on_startup": Field(True, TypeValidator(bool)),
    }


class SearchSettings(SettingsGroup):
    """Debounce interval, minimum query length and result limit of the search bar."""

    group_name = "search"
    fields = {
        "debounce_ms": Field(300, RangeValidator(0, 5000)),
        "min_query_length": Field(3, RangeValidator(1, 50)),
        "result_limit": Field(10, CompositeValidator([TypeValidator(int), RangeValidator(1, 100)])),
    }


class RealtimeSettings(SettingsGroup):
    """Status polling that feeds the container update channel."""

    group_name = "realtime"
    fields = {
        "enabled": Field(True, TypeValidator(bool)),
        "poll_interval_ms": Field(30000, RangeValidator(5000, 600000)),
        "drain_interval_ms": Field(500, RangeValidator(50, 10000)),
    }


class UIStateSettings(SettingsGroup):
    """Widget state remembered between sessions, keyed by table id."""

    group_name = "ui_state"
    fields = {
        "column_widths": Field(
            {},
            MappingValidator(
                SequenceValidator(CompositeValidator([TypeValidator(int), RangeValidator(0, 5000)]))
            ),
        ),
    }


ALL_GROUPS: Tuple[Type[SettingsGroup], ...] = (
    AppSettings,
    LoggingSettings,
    ApiSettings,
    ContainersSettings,
    SearchSettings,
    RealtimeSettings,
    UIStateSettings,
)

"""Process-wide settings registry backed by config.json."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from freightdesk.settings.exceptions import SettingsIOError, SettingsNotFoundError
from freightdesk.settings.groups import ALL_GROUPS, SettingsGroup
from freightdesk.settings.migration import MIGRATIONS, SettingsMigration, parse_version
from freightdesk.settings.observers import SettingsObserver
from freightdesk.utils.paths import BASE_DIR

LOGGER = logging.getLogger(__name__)

CONFIG_VERSION = "1.1.0"
SCHEMA_VERSION = 2

_MISSING = object()


def _fresh_groups() -> Dict[str, SettingsGroup]:
    return {group_type.group_name: group_type() for group_type in ALL_GROUPS}


class SettingsRegistry:
    """Every settings group of the application, persisted to config.json.

    Constructing the registry again returns the same object; passing a path
    then only retargets the file. Top-level keys of config.json that are not
    groups (``schema_version``, keys left by newer releases) are written back
    unchanged. Observers hear about every value that actually changed, never
    about loads.
    """

    _instance: Optional["SettingsRegistry"] = None

    def __new__(cls, config_path: Optional[Path] = None, **_kwargs: Any) -> "SettingsRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(
        self,
        config_path: Optional[Path] = None,
        *,
        migrations: Optional[SettingsMigration] = None,
    ) -> None:
        if getattr(self, "_initialized", False):
            if config_path is not None:
                self._file_path = config_path
            return

        self._file_path = config_path or BASE_DIR / "config.json"
        self._groups = _fresh_groups()
        self._observers: List[SettingsObserver] = []
        self._migrations = migrations or MIGRATIONS
        self._extra: Dict[str, Any] = {"schema_version": SCHEMA_VERSION}
        self._dirty = False
        self._initialized = True

    @property
    def config_path(self) -> Path:
        return self._file_path

    @property
    def is_dirty(self) -> bool:
        """True when a value changed since the last load or save."""

        return self._dirty

    # ------------------------------------------------------------------ values
    def get_value(self, group: str, key: str, default: Any = _MISSING) -> Any:
        settings_group = self._groups.get(group)
        if settings_group is None or key not in settings_group.fields:
            if default is _MISSING:
                raise SettingsNotFoundError(group, key if settings_group else None)
            return default
        return settings_group.get(key)

    def set_value(self, group: str, key: str, value: Any) -> None:
        self.update_group(group, {key: value})

    def update_group(self, group: str, values: Mapping[str, Any]) -> None:
        """Validates all ``values`` first, then stores them and notifies observers."""

        changes = self._require_group(group).update(values)
        if not changes:
            return
        self._dirty = True
        for key, (old_value, new_value) in changes.items():
            self.notify_observers(group, key, old_value, new_value)

    def get_group(self, group: str) -> SettingsGroup:
        return self._require_group(group)

    def group_names(self) -> Tuple[str, ...]:
        return tuple(self._groups)

    def reset_to_defaults(self) -> None:
        for settings_group in self._groups.values():
            settings_group.reset_to_defaults()
        self._dirty = True

    # --------------------------------------------------------------- observers
    def register_observer(self, observer: SettingsObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: SettingsObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def notify_observers(self, group: str, key: str, old_value: Any, new_value: Any) -> None:
        for observer in list(self._observers):
            try:
                observer.on_setting_changed(group, key, old_value, new_value)
            except Exception:
                LOGGER.exception("Settings observer %r failed on %s.%s", observer, group, key)

    # ------------------------------------------------------------- persistence
    def as_dict(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"version": CONFIG_VERSION}
        document.update(self._extra)
        for name, settings_group in self._groups.items():
            document[name] = settings_group.to_dict()
        return document

    def save_to_disk(self, path: Optional[Path] = None) -> None:
        self._write_document(path or self._file_path, self.as_dict())
        self._dirty = False

    def load_from_disk(self, path: Optional[Path] = None) -> None:
        """Reads, migrates and validates config.json; writes defaults when it is missing.

        The file is checked in full before anything is applied, so a bad file
        leaves the current values untouched.
        """

        target = path or self._file_path
        if not target.exists():
            LOGGER.info("Config file %s not found, writing defaults", target)
            self.save_to_disk(target)
            return

        document = self._read_document(target)
        version = parse_version(document.get("version", CONFIG_VERSION))
        if version > parse_version(CONFIG_VERSION):
            LOGGER.warning("Config file %s comes from a newer release (%s)", target, document["version"])
        migrated = bool(self._migrations.pending(version))
        document = self._migrations.apply(document, version, config_path=target)

        staged = _fresh_groups()
        for name, settings_group in staged.items():
            section = document.get(name, {})
            if not isinstance(section, dict):
                raise SettingsIOError(target, f"'{name}' must be a JSON object")
            settings_group.from_dict(section)

        for name, settings_group in staged.items():
            self._groups[name].from_dict(settings_group.to_dict())
        self._extra = {"schema_version": SCHEMA_VERSION}
        self._extra.update(
            (key, value) for key, value in document.items() if key != "version" and key not in self._groups
        )
        self._dirty = migrated

    def export_to_json(self, path: Path) -> None:
        self._write_document(path, self.as_dict())

    def import_from_json(self, path: Path) -> None:
        """Loads another config file and makes it the current config.json."""

        self.load_from_disk(path)
        self.save_to_disk()

    # ----------------------------------------------------------------- helpers
    def _require_group(self, group: str) -> SettingsGroup:
        try:
            return self._groups[group]
        except KeyError:
            raise SettingsNotFoundError(group) from None

    @staticmethod
    def _read_document(path: Path) -> Dict[str, Any]:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise SettingsIOError(path, str(exc)) from exc
        if not isinstance(document, dict):
            raise SettingsIOError(path, "top-level JSON value must be an object")
        return document

    @staticmethod
    def _write_document(path: Path, document: Dict[str, Any]) -> None:
        temp_path = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
            os.replace(temp_path, path)
        except OSError as exc:
            raise SettingsIOError(path, str(exc), operation="write") from exc

"""Upgrades of old config.json documents."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from freightdesk.settings.exceptions import SettingsMigrationError
from freightdesk.settings.groups import RealtimeSettings

LOGGER = logging.getLogger(__name__)

Version = Tuple[int, int, int]
MigrationStep = Callable[[Dict[str, Any]], Dict[str, Any]]


def parse_version(text: str) -> Version:
    """``"1.2"`` -> ``(1, 2, 0)``; anything unparsable counts as ``(0, 0, 0)``."""

    parts = (str(text).split(".") + ["0", "0", "0"])[:3]
    try:
        major, minor, patch = (int(part) for part in parts)
    except ValueError:
        return 0, 0, 0
    return major, minor, patch


def format_version(version: Version) -> str:
    return ".".join(str(part) for part in version)


@dataclass(frozen=True, slots=True)
class Migration:
    target: Version
    step: MigrationStep
    description: str = ""


class SettingsMigration:
    """Ordered set of steps, each bringing the document up to ``target``.

    Before the first step runs, config.json is copied next to itself as
    ``config.json.<old version>.bak``. The copy is put back if any step
    raises.
    """

    def __init__(self) -> None:
        self._migrations: Dict[Version, Migration] = {}

    def register(self, target: Version, description: str = "") -> Callable[[MigrationStep], MigrationStep]:
        def decorator(step: MigrationStep) -> MigrationStep:
            self.add(Migration(target, step, description))
            return step

        return decorator

    def add(self, migration: Migration) -> None:
        self._migrations[migration.target] = migration

    def remove(self, target: Version) -> None:
        self._migrations.pop(target, None)

    def pending(self, current: Version) -> List[Migration]:
        return [self._migrations[target] for target in sorted(self._migrations) if target > current]

    def apply(self, config: Dict[str, Any], current: Version, *, config_path: Path) -> Dict[str, Any]:
        steps = self.pending(current)
        if not steps:
            return config

        backup_path = self.backup(config_path, current)
        for migration in steps:
            try:
                config = migration.step(config)
            except Exception as exc:
                if backup_path is not None:
                    shutil.copy2(backup_path, config_path)
                raise SettingsMigrationError(
                    format_version(current), format_version(migration.target), str(exc)
                ) from exc
            LOGGER.info(
                "Config migrated to %s%s",
                format_version(migration.target),
                f" ({migration.description})" if migration.description else "",
            )
        return config

    @staticmethod
    def backup(config_path: Path, version: Version) -> Optional[Path]:
        if not config_path.exists():
            return None
        backup_path = config_path.with_name(f"{config_path.name}.{format_version(version)}.bak")
        shutil.copy2(config_path, backup_path)
        return backup_path


MIGRATIONS = SettingsMigration()


@MIGRATIONS.register((1, 1, 0), "token moved to the environment, realtime group added")
def migrate_to_1_1_0(config: Dict[str, Any]) -> Dict[str, Any]:
    api = config.get("api")
    if isinstance(api, dict) and api.pop("token", None) is not None:
        LOGGER.warning(
            "api.token removed from config.json; export the token via %s instead.",
            api.get("token_env", "FREIGHTDESK_API_TOKEN"),
        )
    config.setdefault("realtime", RealtimeSettings.defaults())
    config["schema_version"] = 2
    return config

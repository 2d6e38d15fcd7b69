"""Entry point of the FreightDesk container tracker."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from freightdesk import __version__
from freightdesk.api.client import create_api_client
from freightdesk.api.data_provider import FreightDataProvider
from freightdesk.app import create_application
from freightdesk.realtime.channel import UpdateChannel
from freightdesk.settings.exceptions import SettingsError
from freightdesk.settings.observers import LoggingSettingsObserver, LogLevelObserver
from freightdesk.settings.registry import SettingsRegistry
from freightdesk.utils.logger import configure_logging
from freightdesk.utils.paths import BASE_DIR

LOGGER = logging.getLogger(__name__)

CARRIER_ENDPOINTS_TTL_SEC = 3600


def initialize_settings(config_path: Path) -> SettingsRegistry:
    """Returns the settings registry loaded from config.json."""

    registry = SettingsRegistry(config_path=config_path)
    registry.load_from_disk()
    return registry


def setup_logging_from_settings(base_dir: Path, settings: SettingsRegistry) -> None:
    logging_settings = settings.get_group("logging")
    if not logging_settings.get("enabled"):
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    configure_logging(
        log_dir=base_dir / "logs",
        level_name=logging_settings.get("level"),
        max_bytes=logging_settings.get("max_file_size_mb") * 1024 * 1024,
        backup_count=logging_settings.get("max_archived_files"),
    )


def initialize_workdir(base_dir: Path) -> bool:
    """Creates the working directory and its logs/ folder."""

    try:
        base_dir.mkdir(parents=True, exist_ok=True)
        (base_dir / "logs").mkdir(exist_ok=True)
        return True
    except OSError as exc:
        LOGGER.error("Cannot initialize working directory %s: %s", base_dir, exc)
        return False


def build_data_provider(settings: SettingsRegistry) -> FreightDataProvider:
    return FreightDataProvider(
        create_api_client(settings),
        settings,
        endpoints_ttl_sec=CARRIER_ENDPOINTS_TTL_SEC,
    )


def main() -> int:
    base_dir = BASE_DIR
    if not initialize_workdir(base_dir):
        return 1
    configure_logging(base_dir / "logs")

    try:
        settings = initialize_settings(base_dir / "config.json")
    except SettingsError as exc:
        LOGGER.error("Cannot load settings: %s", exc)
        return 1
    setup_logging_from_settings(base_dir, settings)
    settings.register_observer(LoggingSettingsObserver())
    settings.register_observer(LogLevelObserver())

    LOGGER.info("Starting FreightDesk %s", __version__)
    app = create_application(
        settings=settings,
        data_provider=build_data_provider(settings),
        channel=UpdateChannel(),
    )
    return app.run()


if __name__ == "__main__":
    sys.exit(main())

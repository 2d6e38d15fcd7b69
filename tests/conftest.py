"""Shared fixtures."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6 import QtWidgets  # noqa: E402

from freightdesk.settings.registry import SettingsRegistry  # noqa: E402


@pytest.fixture(scope="session")
def qt_app() -> QtWidgets.QApplication:
    """One QApplication for the whole run; timers and widgets need it."""

    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


@pytest.fixture
def registry(tmp_path: Path) -> Iterator[SettingsRegistry]:
    SettingsRegistry._instance = None  # type: ignore[attr-defined]
    reg = SettingsRegistry(tmp_path / "config.json")
    reg.reset_to_defaults()
    yield reg
    SettingsRegistry._instance = None  # type: ignore[attr-defined]

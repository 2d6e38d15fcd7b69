"""Application paths."""

from __future__ import annotations

import os
from pathlib import Path

# BASE_DIR holds config.json and logs/
BASE_DIR = Path(os.environ.get("FREIGHTDESK_HOME", Path.home())) / ".freightdesk"

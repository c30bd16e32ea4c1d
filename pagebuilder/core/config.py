"""Local configuration for the page builder."""

from __future__ import annotations

import os
import sys
from pathlib import Path


DEFAULT_DATA_DIR_NAME = "PageBuilder"
DEFAULT_UI_STATE_FILE = "editor_state.json"

MIN_COLUMNS = 1
MAX_COLUMNS = int(os.getenv("PAGEBUILDER_MAX_COLUMNS", "6"))
MAX_INNER_COLUMNS = int(os.getenv("PAGEBUILDER_MAX_INNER_COLUMNS", "4"))

# Responsive bands, inclusive pixel bounds. None means unbounded.
DESKTOP_MIN_WIDTH = 1025
TABLET_MIN_WIDTH = 768
TABLET_MAX_WIDTH = 1024
MOBILE_MAX_WIDTH = 767

DEFAULT_SHADOW_COLOR = "rgba(0,0,0,0.3)"
NODE_ID_ATTRIBUTE = "data-node-id"


def _default_data_dir() -> Path:
    if sys.platform == "win32":
        base = Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        base = Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))
    return base / DEFAULT_DATA_DIR_NAME


PAGEBUILDER_DATA_DIR = Path(
    os.getenv("PAGEBUILDER_DATA_DIR", str(_default_data_dir()))
).expanduser()
PAGEBUILDER_UI_STATE_PATH = PAGEBUILDER_DATA_DIR / os.getenv(
    "PAGEBUILDER_UI_STATE_FILE", DEFAULT_UI_STATE_FILE
)

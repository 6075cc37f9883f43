"""App-data paths: logs and the saved game live under one root."""

from __future__ import annotations

import os
from pathlib import Path

SAVE_FILE_NAME = "game.json"
_SUBDIRS = ("logs", "saves")


def resolve_game_root() -> Path:
    """Return the project directory that holds the `battleship` package."""
    return Path(__file__).resolve().parents[2]


def resolve_app_data_root() -> Path:
    """`BATTLESHIP_APP_DATA_DIR` (relative to the game root) or `<root>/appdata`."""
    configured = Path(os.getenv("BATTLESHIP_APP_DATA_DIR", "").strip() or "appdata")
    return configured if configured.is_absolute() else resolve_game_root() / configured


def resolve_logs_dir() -> Path:
    return resolve_app_data_root() / "logs"


def resolve_saves_dir() -> Path:
    return resolve_app_data_root() / "saves"


def resolve_save_file() -> Path:
    return resolve_saves_dir() / SAVE_FILE_NAME


def ensure_app_data_dirs() -> dict[str, Path]:
    """Create the app-data tree and return it keyed by `root` and subdir name."""
    root = resolve_app_data_root()
    paths = {"root": root, **{name: root / name for name in _SUBDIRS}}
    for path in paths.values():
        path.mkdir(parents=True, exist_ok=True)
    return paths

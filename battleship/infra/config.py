"""Application configuration and env loading."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

DEFAULT_OPPONENT_DELAY_MS = 400
DEFAULT_ENV_FILES = (
    "appdata/config/.env.app",
    "appdata/config/.env.app.local",
    ".env.app",
    ".env.app.local",
)


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Immutable gameplay configuration."""

    opponent_delay_seconds: float = DEFAULT_OPPONENT_DELAY_MS / 1000.0
    opponent_avoids_repeats: bool = True
    seed: int | None = None
    autosave: bool = True


def load_game_config() -> GameConfig:
    """Load gameplay configuration from env vars; malformed values use defaults."""
    delay_ms = max(0, _int("BATTLESHIP_OPPONENT_DELAY_MS", DEFAULT_OPPONENT_DELAY_MS))
    return GameConfig(
        opponent_delay_seconds=delay_ms / 1000.0,
        opponent_avoids_repeats=_flag("BATTLESHIP_OPPONENT_AVOID_REPEATS", True),
        seed=_optional_int("BATTLESHIP_SEED"),
        autosave=_flag("BATTLESHIP_AUTOSAVE", True),
    )


def resolve_log_level_name(default: str = "INFO") -> str:
    """Resolve log level with app-prefixed override."""
    value = os.getenv("BATTLESHIP_LOG_LEVEL")
    if value is None:
        value = os.getenv("LOG_LEVEL", default)
    return value.strip().upper() or default


def load_env_file(path: str = ".env", *, override_existing: bool = True) -> None:
    """Copy KEY=VALUE lines from an env file into the process environment."""
    env_path = _resolve_env_path(path)
    if not env_path.is_file():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        entry = _parse_env_line(raw_line)
        if entry is None:
            continue
        key, value = entry
        if override_existing or key not in os.environ:
            os.environ[key] = value


def load_default_env_files(
    *, override_existing: bool = True, paths: Sequence[str] | None = None
) -> None:
    """Load `DEFAULT_ENV_FILES` (or `paths`) in order; later files win."""
    for path in DEFAULT_ENV_FILES if paths is None else paths:
        load_env_file(path, override_existing=override_existing)


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    return key, value


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _int(name: str, default: int) -> int:
    value = _optional_int(name)
    return default if value is None else value


def _optional_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _resolve_env_path(path: str) -> Path:
    # Relative paths fall back to the project root when the cwd lacks them.
    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return Path(__file__).resolve().parents[2] / candidate

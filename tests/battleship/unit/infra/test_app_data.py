from __future__ import annotations

from battleship.infra.app_data import (
    ensure_app_data_dirs,
    resolve_app_data_root,
    resolve_game_root,
    resolve_save_file,
)


def test_absolute_app_data_dir(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("BATTLESHIP_APP_DATA_DIR", str(tmp_path / "data"))
    assert resolve_app_data_root() == tmp_path / "data"
    assert resolve_save_file() == tmp_path / "data" / "saves" / "game.json"


def test_relative_app_data_dir_is_under_game_root(monkeypatch) -> None:
    monkeypatch.setenv("BATTLESHIP_APP_DATA_DIR", "custom")
    assert resolve_app_data_root() == resolve_game_root() / "custom"


def test_default_app_data_dir(monkeypatch) -> None:
    monkeypatch.delenv("BATTLESHIP_APP_DATA_DIR", raising=False)
    assert resolve_app_data_root() == resolve_game_root() / "appdata"


def test_ensure_app_data_dirs_creates_tree(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("BATTLESHIP_APP_DATA_DIR", str(tmp_path / "data"))
    paths = ensure_app_data_dirs()
    assert paths["logs"].is_dir()
    assert paths["saves"].is_dir()

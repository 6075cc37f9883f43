from __future__ import annotations

import builtins
import random

import orjson
import pytest

from battleship.app.engine import GameEngine
from battleship.app.scheduler import Scheduler
from battleship.core.models import CellMark, Coord, Screen
from battleship.infra.config import GameConfig
from battleship.main import ConsoleSession, main, parse_coord, render_board
from battleship.saves.repository import SaveRepository
from battleship.saves.service import SaveService


@pytest.mark.parametrize(
    ("text", "expected"),
    [("A1", Coord(0, 0)), ("h8", Coord(7, 7)), (" c4 ", Coord(3, 2))],
)
def test_parse_coord(text: str, expected: Coord) -> None:
    assert parse_coord(text) == expected


@pytest.mark.parametrize("text", ["", "A", "I1", "A9", "A0", "1A", "AA"])
def test_parse_coord_rejects_garbage(text: str) -> None:
    assert parse_coord(text) is None


def test_render_board_uses_glyphs() -> None:
    marks = tuple(
        tuple(CellMark.HIT if (r, c) == (0, 1) else CellMark.EMPTY for c in range(8)) for r in range(8)
    )
    text = render_board("Grid", marks, preview={Coord(1, 1)})
    lines = text.splitlines()
    assert lines[0] == "Grid"
    assert lines[1] == "   A B C D E F G H"
    assert lines[2] == " 1 . x . . . . . ."
    assert lines[3] == " 2 . + . . . . . ."


def _session(tmp_path, seed: int = 3, delay: float = 0.4):
    config = GameConfig(opponent_delay_seconds=delay, autosave=True)
    scheduler = Scheduler()
    engine = GameEngine(rng=random.Random(seed), scheduler=scheduler, config=config)
    saves = SaveService(SaveRepository(tmp_path / "game.json"))
    output: list[str] = []
    sleeps: list[float] = []
    session = ConsoleSession(engine, scheduler, saves, config, output=output.append, sleep=sleeps.append)
    return session, engine, saves, output, sleeps


def test_console_session_plays_a_round(tmp_path) -> None:
    session, engine, saves, output, sleeps = _session(tmp_path)
    assert session.handle("a")
    assert session.handle("s")
    assert engine.state.screen is Screen.BATTLE

    assert session.handle("a1")
    assert engine.state.shot_count == 1
    assert sleeps == [0.4]
    assert engine.view().is_player_turn
    assert any(line.startswith("Enemy fired at") for line in output)
    assert saves.load() == engine.state


def test_console_session_quit_saves_and_resume_restores(tmp_path) -> None:
    session, engine, saves, _, _ = _session(tmp_path)
    session.handle("b2")
    session.handle("b2")
    assert not session.handle("q")

    resumed, resumed_engine, _, output, _ = _session(tmp_path, seed=9)
    resumed.resume()
    assert "Resumed saved game." in output
    assert resumed_engine.state == engine.state
    assert resumed_engine.selected_ship is not None
    assert resumed_engine.selected_ship.value == "Cruiser"


def test_console_session_unknown_command_prints_help(tmp_path) -> None:
    session, _, _, output, _ = _session(tmp_path)
    assert session.handle("zz")
    assert output[-1].startswith("Commands:")


def test_console_session_waits_for_the_scheduled_delay(tmp_path) -> None:
    session, engine, _, _, sleeps = _session(tmp_path, delay=0.25)
    session.handle("a")
    session.handle("s")
    session.handle("c3")
    assert sleeps == [0.25]
    assert not engine.opponent_turn_pending


def test_main_saves_and_flushes_logs_on_eof(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("BATTLESHIP_APP_DATA_DIR", str(tmp_path / "appdata"))
    monkeypatch.delenv("BATTLESHIP_LOG_DIR", raising=False)

    def _eof(prompt: str = "") -> str:
        raise EOFError

    monkeypatch.setattr(builtins, "input", _eof)
    main()

    assert (tmp_path / "appdata" / "saves" / "game.json").is_file()
    log_files = list((tmp_path / "appdata" / "logs").glob("battleship_run_*.jsonl"))
    assert log_files
    messages = [orjson.loads(line)["msg"] for line in log_files[0].read_text(encoding="utf-8").splitlines()]
    assert messages[-1] == "app_exit"

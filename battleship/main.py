"""Application entry point with a text-mode front end."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from battleship.app.engine import GameEngine
from battleship.app.events import GameOver, ShotResolved
from battleship.app.scheduler import Scheduler
from battleship.app.ui_state import GameView
from battleship.core.models import (
    BOARD_SIZE,
    FLEET_ORDER,
    CellMark,
    Coord,
    Outcome,
    Screen,
    ShotResult,
    Side,
)
from battleship.infra.app_data import ensure_app_data_dirs, resolve_save_file
from battleship.infra.config import GameConfig, load_default_env_files, load_game_config
from battleship.infra.logging import setup_logging, shutdown_logging
from battleship.saves.repository import SaveRepository
from battleship.saves.service import SaveService

logger = logging.getLogger(__name__)

COLUMN_LABELS = "ABCDEFGH"
_GLYPHS: dict[CellMark, str] = {
    CellMark.EMPTY: ".",
    CellMark.SHIP: "#",
    CellMark.MISS: "o",
    CellMark.HIT: "x",
    CellMark.SUNK: "X",
}
HELP = (
    "Commands: <cell> e.g. B4 (preview / place / fire), r rotate, 1-4 select ship, "
    "a auto-place, c clear, s start battle, n new game, q save and quit"
)


def parse_coord(text: str) -> Coord | None:
    """Parse `B4`-style input (column letter, 1-based row) into a Coord."""
    cleaned = text.strip().upper()
    if len(cleaned) < 2 or cleaned[0] not in COLUMN_LABELS or not cleaned[1:].isdigit():
        return None
    coord = Coord(row=int(cleaned[1:]) - 1, col=COLUMN_LABELS.index(cleaned[0]))
    return coord if coord.in_bounds(BOARD_SIZE) else None


def render_board(title: str, marks: tuple[tuple[CellMark, ...], ...], preview: set[Coord] | None = None) -> str:
    lines = [title, "   " + " ".join(COLUMN_LABELS)]
    for row, cells in enumerate(marks):
        glyphs = []
        for col, mark in enumerate(cells):
            glyph = _GLYPHS[mark]
            if preview and Coord(row, col) in preview and mark is CellMark.EMPTY:
                glyph = "+"
            glyphs.append(glyph)
        lines.append(f"{row + 1:>2} " + " ".join(glyphs))
    return "\n".join(lines)


def render_view(view: GameView) -> str:
    if view.screen is Screen.PLACEMENT:
        preview = set(view.draft.cells) if view.draft is not None else None
        selected = view.selected_ship.value if view.selected_ship is not None else "fleet complete"
        validity = ""
        if view.draft is not None:
            validity = " (valid, enter the same cell to place)" if view.draft.valid else " (invalid)"
        header = f"Placing: {selected} [{view.orientation.value}]{validity}"
        return "\n".join((header, render_board("Your Fleet", view.player_marks, preview)))
    if view.outcome is Outcome.PLAYER_WON:
        header = "You win!"
    elif view.outcome is Outcome.OPPONENT_WON:
        header = "Enemy wins."
    else:
        header = "Your turn" if view.is_player_turn else "Enemy turn"
    return "\n".join(
        (
            f"{header}  Shots: {view.shot_count}",
            render_board("Your Fleet", view.player_marks),
            render_board("Enemy Waters", view.opponent_marks),
        )
    )


def describe_shot(event: ShotResolved) -> str:
    who = "You" if event.shooter is Side.PLAYER else "Enemy"
    cell = f"{COLUMN_LABELS[event.coord.col]}{event.coord.row + 1}"
    if event.result is ShotResult.SUNK:
        return f"{who} fired at {cell}: sunk!"
    return f"{who} fired at {cell}: {event.result.value.lower()}."


class ConsoleSession:
    """Drives a GameEngine from line-oriented commands."""

    def __init__(
        self,
        engine: GameEngine,
        scheduler: Scheduler,
        saves: SaveService,
        config: GameConfig,
        *,
        output: Callable[[str], None] = print,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._engine = engine
        self._scheduler = scheduler
        self._saves = saves
        self._config = config
        self._output = output
        self._sleep = sleep
        engine.event_bus.subscribe(ShotResolved, lambda event: output(describe_shot(event)))
        engine.event_bus.subscribe(GameOver, lambda event: output(f"Game over: {event.winner.value} wins."))

    def resume(self) -> None:
        saved = self._saves.load()
        if saved is not None:
            self._engine.restore(saved)
            self._output("Resumed saved game.")
            self._settle()

    def handle(self, command: str) -> bool:
        """Apply one command; return False when the session should end."""
        text = command.strip().lower()
        engine = self._engine
        if text in {"q", "quit"}:
            self._saves.save(engine.state)
            return False
        if text in {"h", "help", "?"}:
            self._output(HELP)
            return True
        if text == "n":
            engine.reset()
        elif text == "r":
            engine.rotate()
        elif text == "a":
            engine.auto_place_player()
        elif text == "c":
            engine.clear_placement()
        elif text == "s":
            engine.start_battle()
        elif text in {"1", "2", "3", "4"}:
            engine.select_ship(FLEET_ORDER[int(text) - 1])
        else:
            coord = parse_coord(text)
            if coord is None:
                self._output(HELP)
                return True
            if engine.state.screen is Screen.PLACEMENT:
                engine.tap_placement(coord)
            else:
                engine.fire(coord)
        self._settle()
        if self._config.autosave:
            self._saves.save(engine.state)
        self._output(render_view(engine.view()))
        return True

    def _settle(self) -> None:
        """Let a pending opponent turn play out after its delay."""
        while self._engine.opponent_turn_pending:
            due = self._scheduler.next_due_seconds()
            if due is None:
                break
            self._sleep(max(0.0, due - self._scheduler.now_seconds))
            self._scheduler.run_due(due)


def main() -> None:
    """Run the console game."""
    load_default_env_files()
    paths = ensure_app_data_dirs()
    setup_logging()
    config = load_game_config()
    logger.info("app_data_paths root=%s logs=%s saves=%s", paths["root"], paths["logs"], paths["saves"])

    scheduler = Scheduler()
    engine = GameEngine(rng=random.Random(config.seed), scheduler=scheduler, config=config)
    session = ConsoleSession(engine, scheduler, SaveService(SaveRepository(resolve_save_file())), config)
    try:
        session.resume()
        print(HELP)
        print(render_view(engine.view()))
        while True:
            try:
                line = input("> ")
            except EOFError:
                line = "q"
            if not session.handle(line):
                break
    finally:
        logger.info("app_exit")
        shutdown_logging()


if __name__ == "__main__":
    main()

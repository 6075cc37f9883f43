"""Render-mark projection from board state."""

from __future__ import annotations

import numpy as np

from battleship.app.ui_state import GameView, PlacementDraft
from battleship.core.board import Board
from battleship.core.models import CellMark, Orientation, ShipType
from battleship.core.rules import GameState

_EMPTY, _SHIP, _MISS, _HIT, _SUNK = range(5)
_MARKS: tuple[CellMark, ...] = (
    CellMark.EMPTY,
    CellMark.SHIP,
    CellMark.MISS,
    CellMark.HIT,
    CellMark.SUNK,
)


def mark_codes(board: Board, *, reveal_ships: bool) -> np.ndarray:
    """Return an int8 grid of mark codes; later layers override earlier ones."""
    codes = np.zeros((board.size, board.size), dtype=np.int8)
    if reveal_ships:
        codes[board.occupancy != 0] = _SHIP
    for coord in board.shots_received:
        if board.in_bounds(coord) and board.occupancy[coord.row, coord.col] == 0:
            codes[coord.row, coord.col] = _MISS
    for ship in board.ships:
        layer = _SUNK if ship.is_sunk else _HIT
        for coord in ship.hits:
            codes[coord.row, coord.col] = layer
        if ship.is_sunk:
            for coord in ship.cells:
                codes[coord.row, coord.col] = _SUNK
    return codes


def board_marks(board: Board, *, reveal_ships: bool) -> tuple[tuple[CellMark, ...], ...]:
    """Compute per-cell render marks for one board."""
    codes = mark_codes(board, reveal_ships=reveal_ships)
    return tuple(tuple(_MARKS[code] for code in row) for row in codes.tolist())


def build_game_view(
    state: GameState,
    *,
    draft: PlacementDraft | None,
    selected_ship: ShipType | None,
    orientation: Orientation,
) -> GameView:
    """Build a GameView from the authoritative state; nothing is cached."""
    return GameView(
        screen=state.screen,
        player_marks=board_marks(state.player_board, reveal_ships=True),
        opponent_marks=board_marks(state.opponent_board, reveal_ships=state.is_over),
        draft=draft,
        selected_ship=selected_ship,
        orientation=orientation,
        placed_ships=frozenset(state.player_board.placed_types()),
        turn=state.turn,
        shot_count=state.shot_count,
        outcome=state.outcome,
    )

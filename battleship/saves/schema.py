"""Saved-game record schema.

The record is a flat JSON object. Ship cells and hits are flattened
``[row, col, row, col, ...]`` lists, one per ship, with kind names in a parallel
list; shot histories are lists of ``[row, col]`` pairs. ``enemyShots`` are the
opponent's shots against the player board and ``playerShots`` the player's
shots against the opponent board.

An unknown or missing kind name decodes as a Battleship rather than failing the
whole load. Every other structural problem raises SaveDecodeError.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from battleship.core.board import Board
from battleship.core.errors import SaveDecodeError
from battleship.core.models import (
    BOARD_SIZE,
    Coord,
    Outcome,
    PlacedShip,
    Screen,
    ShipType,
    Side,
)
from battleship.core.rules import GameState

logger = logging.getLogger(__name__)

DEFAULT_SHIP_TYPE = ShipType.BATTLESHIP


def game_to_payload(state: GameState) -> dict[str, object]:
    """Convert a game state to a JSON-serializable record."""
    payload: dict[str, object] = {"screen": state.screen.value}
    payload.update(_board_fields("player", state.player_board))
    payload.update(_board_fields("enemy", state.opponent_board))
    payload["enemyShots"] = _shot_pairs(state.player_board)
    payload["playerShots"] = _shot_pairs(state.opponent_board)
    payload["isPlayerTurn"] = state.turn is Side.PLAYER
    payload["shotsCount"] = state.shot_count
    payload["playerWon"] = state.outcome is Outcome.PLAYER_WON
    payload["enemyWon"] = state.outcome is Outcome.OPPONENT_WON
    return payload


def payload_to_game(payload: object) -> GameState:
    """Convert a loaded record back into a game state."""
    if not isinstance(payload, Mapping):
        raise SaveDecodeError("Saved game must be an object.")

    raw_screen = payload.get("screen", Screen.PLACEMENT.value)
    try:
        screen = Screen(str(raw_screen))
    except ValueError as exc:
        raise SaveDecodeError(f"Unknown screen {raw_screen!r}.") from exc

    player_won = _bool(payload, "playerWon", False)
    enemy_won = _bool(payload, "enemyWon", False)
    if player_won and enemy_won:
        raise SaveDecodeError("Saved game cannot have two winners.")
    if screen is Screen.PLACEMENT and (player_won or enemy_won):
        raise SaveDecodeError("A game still in placement cannot have a winner.")
    if player_won:
        outcome = Outcome.PLAYER_WON
    elif enemy_won:
        outcome = Outcome.OPPONENT_WON
    else:
        outcome = Outcome.IN_PROGRESS

    shot_count = payload.get("shotsCount", 0)
    if not _is_int(shot_count) or shot_count < 0:
        raise SaveDecodeError("shotsCount must be a non-negative integer.")

    return GameState(
        player_board=_decode_board(payload, "player", "enemyShots"),
        opponent_board=_decode_board(payload, "enemy", "playerShots"),
        screen=screen,
        turn=Side.PLAYER if _bool(payload, "isPlayerTurn", True) else Side.OPPONENT,
        shot_count=shot_count,
        outcome=outcome,
    )


def _board_fields(prefix: str, board: Board) -> dict[str, object]:
    return {
        f"{prefix}Ships": [_flatten(ship.cells) for ship in board.ships],
        f"{prefix}ShipTypes": [ship.ship_type.value for ship in board.ships],
        f"{prefix}ShipHits": [
            _flatten(cell for cell in ship.cells if cell in ship.hits) for ship in board.ships
        ],
    }


def _shot_pairs(board: Board) -> list[list[int]]:
    ordered = sorted(board.shots_received, key=lambda coord: (coord.row, coord.col))
    return [[coord.row, coord.col] for coord in ordered]


def _flatten(cells) -> list[int]:
    flat: list[int] = []
    for cell in cells:
        flat.extend((cell.row, cell.col))
    return flat


def _decode_board(payload: Mapping[str, object], prefix: str, shots_key: str) -> Board:
    raw_ships = _list(payload, f"{prefix}Ships")
    raw_types = _list(payload, f"{prefix}ShipTypes")
    raw_hits = _list(payload, f"{prefix}ShipHits")

    ships: list[PlacedShip] = []
    for index, raw_cells in enumerate(raw_ships):
        cells = _regroup(raw_cells, f"{prefix}Ships[{index}]")
        if not cells:
            raise SaveDecodeError(f"{prefix}Ships[{index}] has no cells.")
        hits = _regroup(raw_hits[index], f"{prefix}ShipHits[{index}]") if index < len(raw_hits) else []
        if not set(hits).issubset(cells):
            raise SaveDecodeError(f"{prefix}ShipHits[{index}] lies outside its ship.")
        ship_type = _ship_type(raw_types[index] if index < len(raw_types) else None, prefix, index)
        ships.append(PlacedShip(ship_type=ship_type, cells=tuple(cells), hits=set(hits)))

    shots: set[Coord] = set()
    for index, pair in enumerate(_list(payload, shots_key)):
        coords = _regroup(pair, f"{shots_key}[{index}]")
        if len(coords) != 1:
            raise SaveDecodeError(f"{shots_key}[{index}] must be a [row, col] pair.")
        shots.add(coords[0])

    # Hits and shots are two records of the same fact.
    for index, ship in enumerate(ships):
        if ship.hits != shots.intersection(ship.cells):
            raise SaveDecodeError(f"{prefix}ShipHits[{index}] disagrees with {shots_key}.")

    try:
        return Board(ships=ships, shots_received=shots)
    except ValueError as exc:
        raise SaveDecodeError(f"Overlapping ships in {prefix} fleet.") from exc


def _regroup(raw: object, label: str) -> list[Coord]:
    if not isinstance(raw, list) or len(raw) % 2 != 0 or not all(_is_int(v) for v in raw):
        raise SaveDecodeError(f"{label} must be a flat list of coordinate pairs.")
    coords = [Coord(raw[i], raw[i + 1]) for i in range(0, len(raw), 2)]
    for coord in coords:
        if not coord.in_bounds(BOARD_SIZE):
            raise SaveDecodeError(f"{label} contains off-grid cell ({coord.row}, {coord.col}).")
    return coords


def _ship_type(raw: object, prefix: str, index: int) -> ShipType:
    try:
        return ShipType(str(raw))
    except ValueError:
        logger.warning(
            "unknown_ship_type fleet=%s index=%d value=%r defaulting=%s",
            prefix,
            index,
            raw,
            DEFAULT_SHIP_TYPE.value,
        )
        return DEFAULT_SHIP_TYPE


def _list(payload: Mapping[str, object], key: str) -> list[object]:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise SaveDecodeError(f"{key} must be a list.")
    return value


def _bool(payload: Mapping[str, object], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if not isinstance(value, bool):
        raise SaveDecodeError(f"{key} must be a boolean.")
    return value


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

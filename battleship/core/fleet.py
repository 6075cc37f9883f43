"""Fleet placement validation and random construction."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from battleship.core.board import Board
from battleship.core.errors import PlacementExhaustedError
from battleship.core.models import BOARD_SIZE, FLEET_ORDER, Coord, Orientation, ShipType

logger = logging.getLogger(__name__)

PLACEMENT_ATTEMPTS = 500


def validate_fleet(board: Board) -> tuple[bool, str]:
    """Validate whether a board holds exactly one ship of each kind."""
    seen: set[ShipType] = set()
    for ship in board.ships:
        if ship.ship_type in seen:
            return False, f"Duplicate ship type: {ship.ship_type.value}."
        seen.add(ship.ship_type)
    missing = [ship_type for ship_type in FLEET_ORDER if ship_type not in seen]
    if missing:
        return False, f"Missing ships: {', '.join(ship.value for ship in missing)}."
    return True, ""


def auto_place(
    board: Board,
    rng: random.Random,
    ship_types: Iterable[ShipType] = FLEET_ORDER,
    *,
    attempts: int = PLACEMENT_ATTEMPTS,
) -> None:
    """Randomly place each given ship type on `board`.

    Every sample is drawn with an origin that keeps the ship on the grid, so only
    overlap can reject it. Raises PlacementExhaustedError instead of skipping a
    ship when the budget runs out.
    """
    for ship_type in ship_types:
        cells = _sample_free_cells(board, rng, ship_type, attempts)
        if cells is None:
            raise PlacementExhaustedError(ship_type.value, attempts)
        board.place_ship(ship_type, cells)
    logger.debug("fleet_auto_placed ships=%d", len(board.ships))


def random_board(rng: random.Random, size: int = BOARD_SIZE) -> Board:
    """Create a board holding a complete randomly placed fleet."""
    board = Board(size=size)
    auto_place(board, rng)
    return board


def _sample_free_cells(
    board: Board, rng: random.Random, ship_type: ShipType, attempts: int
) -> list[Coord] | None:
    size = board.size
    for _ in range(attempts):
        orientation = rng.choice((Orientation.HORIZONTAL, Orientation.VERTICAL))
        if orientation is Orientation.HORIZONTAL:
            origin = Coord(rng.randrange(size), rng.randrange(size - ship_type.length + 1))
        else:
            origin = Coord(rng.randrange(size - ship_type.length + 1), rng.randrange(size))
        cells = board.can_place(ship_type, origin, orientation)
        if cells is not None:
            return cells
    return None

"""Core domain models used by game logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

BOARD_SIZE = 8


class Orientation(StrEnum):
    """Ship orientation."""

    HORIZONTAL = "H"
    VERTICAL = "V"

    def toggled(self) -> Orientation:
        if self is Orientation.HORIZONTAL:
            return Orientation.VERTICAL
        return Orientation.HORIZONTAL


class ShipType(StrEnum):
    """Ship kinds; values double as the persisted kind names."""

    BATTLESHIP = "Battleship"
    CRUISER = "Cruiser"
    DESTROYER = "Destroyer"
    SUBMARINE = "Submarine"

    @property
    def length(self) -> int:
        return SHIP_LENGTHS[self]


SHIP_LENGTHS: dict[ShipType, int] = {
    ShipType.BATTLESHIP: 4,
    ShipType.CRUISER: 3,
    ShipType.DESTROYER: 2,
    ShipType.SUBMARINE: 1,
}

FLEET_ORDER: tuple[ShipType, ...] = (
    ShipType.BATTLESHIP,
    ShipType.CRUISER,
    ShipType.DESTROYER,
    ShipType.SUBMARINE,
)


class ShotResult(StrEnum):
    """Result of a single shot against a board."""

    MISS = "MISS"
    HIT = "HIT"
    SUNK = "SUNK"
    REPEAT = "REPEAT"
    INVALID = "INVALID"


class Side(StrEnum):
    """Turn owner / shooter."""

    PLAYER = "PLAYER"
    OPPONENT = "OPPONENT"


class Outcome(StrEnum):
    """Game result."""

    IN_PROGRESS = "IN_PROGRESS"
    PLAYER_WON = "PLAYER_WON"
    OPPONENT_WON = "OPPONENT_WON"


class Screen(StrEnum):
    """Top-level game phase as persisted."""

    PLACEMENT = "placement"
    BATTLE = "battle"


class CellMark(StrEnum):
    """Render-relevant state of one cell."""

    EMPTY = "EMPTY"
    SHIP = "SHIP"
    MISS = "MISS"
    HIT = "HIT"
    SUNK = "SUNK"


@dataclass(frozen=True, slots=True)
class Coord:
    """Board coordinate."""

    row: int
    col: int

    def in_bounds(self, size: int = BOARD_SIZE) -> bool:
        return 0 <= self.row < size and 0 <= self.col < size


@dataclass(slots=True)
class PlacedShip:
    """A committed ship and the hits it has taken."""

    ship_type: ShipType
    cells: tuple[Coord, ...]
    hits: set[Coord] = field(default_factory=set)

    @property
    def is_sunk(self) -> bool:
        return self.hits.issuperset(self.cells)

    def register_hit(self, coord: Coord) -> bool:
        """Record a hit on one of this ship's cells; return whether it was new."""
        if coord not in self.cells or coord in self.hits:
            return False
        self.hits.add(coord)
        return True


def cells_for(ship_type: ShipType, origin: Coord, orientation: Orientation) -> list[Coord]:
    """Compute the cells a ship would occupy; no bounds checking."""
    result: list[Coord] = []
    for i in range(ship_type.length):
        if orientation is Orientation.HORIZONTAL:
            result.append(Coord(origin.row, origin.col + i))
        else:
            result.append(Coord(origin.row + i, origin.col))
    return result


def next_unplaced(placed: set[ShipType] | frozenset[ShipType]) -> ShipType | None:
    """Return the first ship type in fleet order that is not yet placed."""
    for ship_type in FLEET_ORDER:
        if ship_type not in placed:
            return ship_type
    return None

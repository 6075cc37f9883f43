"""Board state representation and mutation helpers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from battleship.core.models import (
    BOARD_SIZE,
    Coord,
    Orientation,
    PlacedShip,
    ShipType,
    ShotResult,
    cells_for,
)


@dataclass(slots=True)
class Board:
    """One side's fleet and the shots fired against it.

    `occupancy` mirrors `ships` as a grid of 1-based ship indices (0 is water) so
    cell lookups stay constant time; it is derived state and excluded from
    equality.
    """

    size: int = BOARD_SIZE
    ships: list[PlacedShip] = field(default_factory=list)
    shots_received: set[Coord] = field(default_factory=set)
    occupancy: np.ndarray = field(
        default_factory=lambda: np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8),
        compare=False,
        repr=False,
    )

    def __post_init__(self) -> None:
        if self.occupancy.shape != (self.size, self.size):
            self.occupancy = np.zeros((self.size, self.size), dtype=np.int8)
        self._reindex()

    def in_bounds(self, coord: Coord) -> bool:
        """Return whether the coordinate is in board bounds."""
        return coord.in_bounds(self.size)

    def can_place(
        self, ship_type: ShipType, origin: Coord, orientation: Orientation
    ) -> list[Coord] | None:
        """Return candidate cells when the placement is legal, otherwise None."""
        cells = cells_for(ship_type, origin, orientation)
        if not self._cells_free(cells):
            return None
        return cells

    def place_ship(self, ship_type: ShipType, cells: Iterable[Coord]) -> PlacedShip:
        """Append a ship occupying `cells`."""
        cells = tuple(cells)
        if len(cells) != ship_type.length or not self._cells_free(cells):
            raise ValueError(f"Invalid placement for {ship_type.value}.")
        ship = PlacedShip(ship_type=ship_type, cells=cells)
        self.ships.append(ship)
        for cell in cells:
            self.occupancy[cell.row, cell.col] = len(self.ships)
        return ship

    def ship_at(self, coord: Coord) -> PlacedShip | None:
        """Return the ship owning this cell, if any."""
        if not self.in_bounds(coord):
            return None
        index = int(self.occupancy[coord.row, coord.col])
        if index == 0:
            return None
        return self.ships[index - 1]

    def all_occupied_cells(self) -> set[Coord]:
        """Return the union of every ship's cells."""
        return {cell for ship in self.ships for cell in ship.cells}

    def placed_types(self) -> set[ShipType]:
        return {ship.ship_type for ship in self.ships}

    def was_shot(self, coord: Coord) -> bool:
        """Return whether this cell was previously targeted."""
        return coord in self.shots_received

    def apply_shot(self, coord: Coord) -> tuple[ShotResult, PlacedShip | None]:
        """Apply a shot and return result + the ship struck, if any."""
        if not self.in_bounds(coord):
            return ShotResult.INVALID, None
        if self.was_shot(coord):
            return ShotResult.REPEAT, None

        self.shots_received.add(coord)
        ship = self.ship_at(coord)
        if ship is None:
            return ShotResult.MISS, None
        ship.register_hit(coord)
        if ship.is_sunk:
            return ShotResult.SUNK, ship
        return ShotResult.HIT, ship

    def is_fleet_sunk(self) -> bool:
        """Return whether every ship has been sunk."""
        return bool(self.ships) and all(ship.is_sunk for ship in self.ships)

    def clear_shots(self) -> None:
        self.shots_received.clear()
        for ship in self.ships:
            ship.hits.clear()

    def _cells_free(self, cells: Iterable[Coord]) -> bool:
        for cell in cells:
            if not self.in_bounds(cell):
                return False
            if self.occupancy[cell.row, cell.col] != 0:
                return False
        return True

    def _reindex(self) -> None:
        self.occupancy.fill(0)
        for index, ship in enumerate(self.ships, start=1):
            for cell in ship.cells:
                if not self.in_bounds(cell) or self.occupancy[cell.row, cell.col] != 0:
                    raise ValueError(f"Invalid placement for {ship.ship_type.value}.")
                self.occupancy[cell.row, cell.col] = index

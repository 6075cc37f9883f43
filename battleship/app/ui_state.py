"""Typed view state exposed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass

from battleship.core.models import (
    FLEET_ORDER,
    CellMark,
    Coord,
    Orientation,
    Outcome,
    Screen,
    ShipType,
    Side,
)


@dataclass(frozen=True, slots=True)
class PlacementDraft:
    """Pending placement candidate; never persisted.

    `cells` keeps only the on-grid part of the candidate so it can be drawn even
    when the placement is invalid.
    """

    ship_type: ShipType
    origin: Coord
    orientation: Orientation
    cells: tuple[Coord, ...]
    valid: bool


@dataclass(frozen=True, slots=True)
class GameView:
    """View-ready snapshot of the whole game."""

    screen: Screen
    player_marks: tuple[tuple[CellMark, ...], ...]
    opponent_marks: tuple[tuple[CellMark, ...], ...]
    draft: PlacementDraft | None
    selected_ship: ShipType | None
    orientation: Orientation
    placed_ships: frozenset[ShipType]
    turn: Side
    shot_count: int
    outcome: Outcome

    @property
    def is_player_turn(self) -> bool:
        return self.turn is Side.PLAYER

    @property
    def can_start_battle(self) -> bool:
        return self.screen is Screen.PLACEMENT and self.placed_ships.issuperset(FLEET_ORDER)

    def player_mark(self, coord: Coord) -> CellMark:
        return self.player_marks[coord.row][coord.col]

    def opponent_mark(self, coord: Coord) -> CellMark:
        return self.opponent_marks[coord.row][coord.col]

"""Game state and turn resolution logic."""

from __future__ import annotations

from dataclasses import dataclass, field

from battleship.core.board import Board
from battleship.core.models import (
    Coord,
    Outcome,
    PlacedShip,
    Screen,
    ShotResult,
    Side,
)


@dataclass(slots=True)
class GameState:
    """Complete state of one game; owns both boards."""

    player_board: Board = field(default_factory=Board)
    opponent_board: Board = field(default_factory=Board)
    screen: Screen = Screen.PLACEMENT
    turn: Side = Side.PLAYER
    shot_count: int = 0
    outcome: Outcome = Outcome.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        return self.outcome is not Outcome.IN_PROGRESS

    @property
    def winner(self) -> Side | None:
        if self.outcome is Outcome.PLAYER_WON:
            return Side.PLAYER
        if self.outcome is Outcome.OPPONENT_WON:
            return Side.OPPONENT
        return None

    @property
    def accepts_player_shot(self) -> bool:
        return (
            self.screen is Screen.BATTLE
            and not self.is_over
            and self.turn is Side.PLAYER
        )


def player_fire(state: GameState, coord: Coord) -> tuple[ShotResult, PlacedShip | None]:
    """Resolve a player shot at the opponent board.

    Returns INVALID when the shot is not allowed right now and REPEAT for a cell
    already fired upon; neither changes the state.
    """
    if not state.accepts_player_shot:
        return ShotResult.INVALID, None

    result, ship = state.opponent_board.apply_shot(coord)
    if result in (ShotResult.INVALID, ShotResult.REPEAT):
        return result, None

    state.shot_count += 1
    if state.opponent_board.is_fleet_sunk():
        state.outcome = Outcome.PLAYER_WON
    else:
        state.turn = Side.OPPONENT
    return result, ship


def opponent_fire(state: GameState, coord: Coord) -> tuple[ShotResult, PlacedShip | None]:
    """Resolve an opponent shot at the player board.

    A REPEAT still consumes the opponent's turn.
    """
    if state.screen is not Screen.BATTLE or state.is_over or state.turn is not Side.OPPONENT:
        return ShotResult.INVALID, None

    result, ship = state.player_board.apply_shot(coord)
    if result is ShotResult.INVALID:
        return result, None

    if state.player_board.is_fleet_sunk():
        state.outcome = Outcome.OPPONENT_WON
    else:
        state.turn = Side.PLAYER
    return result, ship

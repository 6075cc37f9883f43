"""Game engine: placement, turn sequencing and the delayed opponent turn."""

from __future__ import annotations

import logging
import random

from battleship.ai.random_target import RandomTargeting
from battleship.app.events import (
    BattleStarted,
    EventBus,
    GameOver,
    GameReset,
    PlacementCleared,
    PlacementPreviewed,
    ShipPlaced,
    ShotResolved,
    TurnChanged,
)
from battleship.app.projection import build_game_view
from battleship.app.scheduler import Scheduler
from battleship.app.ui_state import GameView, PlacementDraft
from battleship.core.board import Board
from battleship.core.fleet import auto_place, validate_fleet
from battleship.core.models import (
    FLEET_ORDER,
    Coord,
    Orientation,
    Outcome,
    PlacedShip,
    Screen,
    ShipType,
    ShotResult,
    Side,
    cells_for,
    next_unplaced,
)
from battleship.core.rules import GameState, opponent_fire, player_fire
from battleship.infra.config import GameConfig

logger = logging.getLogger(__name__)

Events = list[object]


class GameEngine:
    """Owns one GameState and applies player/opponent actions to it.

    Every operation returns the events it produced (empty for ignored calls) and
    publishes them on `event_bus`. The opponent's shot runs from a scheduler task
    tagged with the current epoch; `reset` and `restore` bump the epoch so a
    stale task never touches the new state.
    """

    def __init__(
        self,
        *,
        rng: random.Random,
        scheduler: Scheduler,
        config: GameConfig | None = None,
        event_bus: EventBus | None = None,
        targeting: RandomTargeting | None = None,
    ) -> None:
        self._rng = rng
        self._scheduler = scheduler
        self._config = config or GameConfig()
        self._event_bus = event_bus or EventBus()
        self._targeting = targeting or RandomTargeting(
            rng, avoid_repeats=self._config.opponent_avoids_repeats
        )
        self._state = GameState()
        self._epoch = 0
        self._pending_task: int | None = None
        self._selected_ship: ShipType | None = ShipType.BATTLESHIP
        self._orientation = Orientation.HORIZONTAL
        self._draft: PlacementDraft | None = None

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def draft(self) -> PlacementDraft | None:
        return self._draft

    @property
    def selected_ship(self) -> ShipType | None:
        return self._selected_ship

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    @property
    def opponent_turn_pending(self) -> bool:
        return self._pending_task is not None

    def view(self) -> GameView:
        """Return render-ready state recomputed from the boards."""
        return build_game_view(
            self._state,
            draft=self._draft,
            selected_ship=self._selected_ship,
            orientation=self._orientation,
        )

    # Placement

    def select_ship(self, ship_type: ShipType) -> Events:
        if not self._in_placement() or ship_type in self._state.player_board.placed_types():
            logger.debug("select_ship_ignored ship=%s", ship_type.value)
            return []
        self._selected_ship = ship_type
        self._draft = None
        return []

    def rotate(self) -> Events:
        """Toggle orientation and refresh the pending preview, if any."""
        if not self._in_placement():
            return []
        self._orientation = self._orientation.toggled()
        if self._draft is not None:
            return self.preview_placement(self._draft.origin)
        return []

    def preview_placement(self, coord: Coord) -> Events:
        """Record a draft for the selected ship at `coord` without placing it."""
        ship_type = self._selected_ship
        if not self._in_placement() or ship_type is None:
            return []
        board = self._state.player_board
        legal = board.can_place(ship_type, coord, self._orientation)
        candidate = legal if legal is not None else cells_for(ship_type, coord, self._orientation)
        self._draft = PlacementDraft(
            ship_type=ship_type,
            origin=coord,
            orientation=self._orientation,
            cells=tuple(cell for cell in candidate if board.in_bounds(cell)),
            valid=legal is not None,
        )
        return self._emit(
            PlacementPreviewed(
                ship_type=ship_type,
                origin=coord,
                orientation=self._orientation,
                cells=self._draft.cells,
                valid=self._draft.valid,
            )
        )

    def commit_placement(self) -> Events:
        """Place the drafted ship; ignored without a valid draft."""
        draft = self._draft
        if not self._in_placement() or draft is None or not draft.valid:
            logger.debug("commit_placement_ignored draft=%s", draft)
            return []
        board = self._state.player_board
        cells = board.can_place(draft.ship_type, draft.origin, draft.orientation)
        if cells is None:
            return []
        ship = board.place_ship(draft.ship_type, cells)
        self._draft = None
        self._selected_ship = next_unplaced(board.placed_types())
        logger.info("ship_placed ship=%s origin=%s", ship.ship_type.value, draft.origin)
        return self._emit(ShipPlaced(ship_type=ship.ship_type, cells=ship.cells))

    def tap_placement(self, coord: Coord) -> Events:
        """Preview on first tap, commit when the pending origin is tapped again."""
        if self._draft is not None and self._draft.origin == coord:
            return self.commit_placement()
        return self.preview_placement(coord)

    def auto_place_player(self) -> Events:
        """Randomly place every ship the player has not placed yet."""
        if not self._in_placement():
            return []
        board = self._state.player_board
        before = len(board.ships)
        remaining = [ship for ship in FLEET_ORDER if ship not in board.placed_types()]
        auto_place(board, self._rng, remaining)
        self._draft = None
        self._selected_ship = None
        return self._emit(
            *(ShipPlaced(ship_type=ship.ship_type, cells=ship.cells) for ship in board.ships[before:])
        )

    def clear_placement(self) -> Events:
        if not self._in_placement():
            return []
        self._state.player_board = Board()
        self._reset_placement_ui()
        return self._emit(PlacementCleared())

    # Battle

    def start_battle(self) -> Events:
        """Auto-place the opponent and hand the first turn to the player."""
        if not self._in_placement():
            return []
        valid, reason = validate_fleet(self._state.player_board)
        if not valid:
            logger.debug("start_battle_ignored reason=%s", reason)
            return []
        state = self._state
        state.player_board.clear_shots()
        state.opponent_board = Board()
        auto_place(state.opponent_board, self._rng)
        state.shot_count = 0
        state.turn = Side.PLAYER
        state.outcome = Outcome.IN_PROGRESS
        state.screen = Screen.BATTLE
        self._draft = None
        logger.info("battle_started epoch=%d", self._epoch)
        return self._emit(BattleStarted(), TurnChanged(turn=Side.PLAYER))

    def fire(self, coord: Coord) -> Events:
        """Fire at the opponent board; illegal or repeated shots are ignored."""
        result, ship = player_fire(self._state, coord)
        if result in (ShotResult.INVALID, ShotResult.REPEAT):
            logger.debug("fire_ignored coord=%s result=%s", coord, result.value)
            return []
        events: Events = [self._shot_event(Side.PLAYER, coord, result, ship)]
        winner = self._state.winner
        if winner is not None:
            logger.info("game_over winner=%s shots=%d", winner.value, self._state.shot_count)
            events.append(GameOver(winner=winner))
        else:
            events.append(TurnChanged(turn=Side.OPPONENT))
            self._schedule_opponent_turn()
        return self._emit(*events)

    def reset(self) -> Events:
        """Start a fresh game; any pending opponent turn is discarded."""
        self._replace_state(GameState())
        logger.info("game_reset epoch=%d", self._epoch)
        return self._emit(GameReset())

    def restore(self, state: GameState) -> Events:
        """Adopt a previously saved state wholesale."""
        self._replace_state(state)
        self._selected_ship = next_unplaced(state.player_board.placed_types())
        if state.screen is Screen.BATTLE and not state.is_over and state.turn is Side.OPPONENT:
            self._schedule_opponent_turn()
        logger.info("game_restored screen=%s turn=%s", state.screen.value, state.turn.value)
        return []

    # Internals

    def _in_placement(self) -> bool:
        return self._state.screen is Screen.PLACEMENT

    def _reset_placement_ui(self) -> None:
        self._draft = None
        self._selected_ship = ShipType.BATTLESHIP
        self._orientation = Orientation.HORIZONTAL

    def _replace_state(self, state: GameState) -> None:
        self._epoch += 1
        if self._pending_task is not None:
            self._scheduler.cancel(self._pending_task)
            self._pending_task = None
        self._state = state
        self._reset_placement_ui()

    def _schedule_opponent_turn(self) -> None:
        epoch = self._epoch
        self._pending_task = self._scheduler.call_later(
            self._config.opponent_delay_seconds,
            lambda: self._run_opponent_turn(epoch),
        )

    def _run_opponent_turn(self, epoch: int) -> None:
        if epoch != self._epoch:
            logger.debug("stale_opponent_turn epoch=%d current=%d", epoch, self._epoch)
            return
        self._pending_task = None
        coord = self._targeting.choose_shot(self._state.player_board)
        result, ship = opponent_fire(self._state, coord)
        if result is ShotResult.INVALID:
            return
        events: Events = [self._shot_event(Side.OPPONENT, coord, result, ship)]
        winner = self._state.winner
        if winner is not None:
            logger.info("game_over winner=%s shots=%d", winner.value, self._state.shot_count)
            events.append(GameOver(winner=winner))
        else:
            events.append(TurnChanged(turn=Side.PLAYER))
        self._emit(*events)

    @staticmethod
    def _shot_event(
        shooter: Side, coord: Coord, result: ShotResult, ship: PlacedShip | None
    ) -> ShotResolved:
        sunk_cells = ship.cells if result is ShotResult.SUNK and ship is not None else ()
        return ShotResolved(shooter=shooter, coord=coord, result=result, sunk_cells=sunk_cells)

    def _emit(self, *events: object) -> Events:
        for event in events:
            self._event_bus.publish(event)
        return list(events)

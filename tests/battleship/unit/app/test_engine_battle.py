from __future__ import annotations

import random

from battleship.ai.random_target import RandomTargeting
from battleship.app.engine import GameEngine
from battleship.app.events import GameOver, GameReset, ShotResolved, TurnChanged
from battleship.core.models import CellMark, Coord, Outcome, Screen, ShotResult, Side
from battleship.core.rules import GameState

DELAY = 0.4


def _free_cell(engine) -> Coord:
    occupied = engine.state.opponent_board.all_occupied_cells()
    for row in range(8):
        for col in range(8):
            coord = Coord(row, col)
            if coord not in occupied and not engine.state.opponent_board.was_shot(coord):
                return coord
    raise AssertionError("no free cell")


def test_fire_before_battle_is_ignored(placed_engine) -> None:
    assert placed_engine.fire(Coord(3, 3)) == []
    assert placed_engine.state.shot_count == 0


def test_miss_marks_cell_and_passes_turn(battle_engine, scheduler) -> None:
    coord = _free_cell(battle_engine)
    events = battle_engine.fire(coord)
    assert events == [
        ShotResolved(shooter=Side.PLAYER, coord=coord, result=ShotResult.MISS),
        TurnChanged(turn=Side.OPPONENT),
    ]
    view = battle_engine.view()
    assert view.opponent_mark(coord) is CellMark.MISS
    assert view.shot_count == 1
    assert not view.is_player_turn
    assert battle_engine.opponent_turn_pending
    assert scheduler.pending_count == 1


def test_fire_rejected_while_opponent_thinking(battle_engine, scheduler) -> None:
    battle_engine.fire(_free_cell(battle_engine))
    assert battle_engine.fire(_free_cell(battle_engine)) == []
    assert battle_engine.state.shot_count == 1

    scheduler.advance(DELAY / 2)
    assert battle_engine.state.turn is Side.OPPONENT
    scheduler.advance(DELAY / 2)
    assert battle_engine.state.turn is Side.PLAYER
    assert not battle_engine.opponent_turn_pending
    assert len(battle_engine.state.player_board.shots_received) == 1


def test_opponent_shot_is_published(battle_engine, scheduler) -> None:
    seen: list[object] = []
    battle_engine.event_bus.subscribe(ShotResolved, seen.append)
    battle_engine.event_bus.subscribe(TurnChanged, seen.append)
    battle_engine.fire(_free_cell(battle_engine))
    scheduler.advance(DELAY)
    opponent_shots = [e for e in seen if isinstance(e, ShotResolved) and e.shooter is Side.OPPONENT]
    assert len(opponent_shots) == 1
    assert seen[-1] == TurnChanged(turn=Side.PLAYER)
    assert battle_engine.state.player_board.was_shot(opponent_shots[0].coord)


def test_repeat_fire_is_idempotent(battle_engine, scheduler) -> None:
    coord = _free_cell(battle_engine)
    battle_engine.fire(coord)
    scheduler.advance(DELAY)
    assert battle_engine.fire(coord) == []
    assert battle_engine.state.shot_count == 1
    assert battle_engine.state.turn is Side.PLAYER
    assert scheduler.pending_count == 0


def test_sinking_shot_reports_all_cells(battle_engine, scheduler) -> None:
    submarine = next(ship for ship in battle_engine.state.opponent_board.ships if len(ship.cells) == 1)
    events = battle_engine.fire(submarine.cells[0])
    assert events[0] == ShotResolved(
        shooter=Side.PLAYER,
        coord=submarine.cells[0],
        result=ShotResult.SUNK,
        sunk_cells=submarine.cells,
    )
    assert battle_engine.view().opponent_mark(submarine.cells[0]) is CellMark.SUNK


def test_final_shot_wins_before_opponent_turn(battle_engine, scheduler) -> None:
    targets = [cell for ship in battle_engine.state.opponent_board.ships for cell in ship.cells]
    for coord in targets[:-1]:
        battle_engine.fire(coord)
        scheduler.advance(DELAY)
    assert battle_engine.state.outcome is Outcome.IN_PROGRESS

    events = battle_engine.fire(targets[-1])
    assert events[-1] == GameOver(winner=Side.PLAYER)
    state = battle_engine.state
    assert state.outcome is Outcome.PLAYER_WON
    assert state.shot_count == len(targets)
    assert not battle_engine.opponent_turn_pending
    assert scheduler.pending_count == 0
    assert battle_engine.fire(_free_cell(battle_engine)) == []
    assert battle_engine.view().opponent_mark(_free_cell(battle_engine)) is CellMark.EMPTY


def test_opponent_can_win(scheduler) -> None:
    engine = GameEngine(
        rng=random.Random(5),
        scheduler=scheduler,
        targeting=RandomTargeting(random.Random(0), attempts=100_000),
    )
    engine.auto_place_player()
    engine.start_battle()
    player_board = engine.state.player_board
    # Leave one player cell afloat and every other cell already fired upon.
    last = player_board.ships[0].cells[0]
    for row in range(8):
        for col in range(8):
            coord = Coord(row, col)
            if coord != last:
                player_board.apply_shot(coord)

    seen: list[object] = []
    engine.event_bus.subscribe(GameOver, seen.append)
    engine.fire(_free_cell(engine))
    scheduler.advance(DELAY)
    assert engine.state.outcome is Outcome.OPPONENT_WON
    assert seen == [GameOver(winner=Side.OPPONENT)]
    assert engine.fire(_free_cell(engine)) == []


def test_reset_discards_pending_opponent_turn(battle_engine, scheduler) -> None:
    battle_engine.fire(_free_cell(battle_engine))
    epoch = battle_engine.epoch
    assert battle_engine.reset() == [GameReset()]
    assert battle_engine.epoch == epoch + 1
    scheduler.advance(DELAY)
    state = battle_engine.state
    assert state.screen is Screen.PLACEMENT
    assert state.player_board.ships == []
    assert state.player_board.shots_received == set()
    assert state.turn is Side.PLAYER


def test_stale_task_is_ignored_even_if_it_runs(battle_engine, scheduler) -> None:
    battle_engine.fire(_free_cell(battle_engine))
    task_runner = battle_engine._run_opponent_turn
    stale_epoch = battle_engine.epoch
    battle_engine.reset()
    task_runner(stale_epoch)
    assert battle_engine.state.player_board.shots_received == set()


def test_restore_reschedules_opponent_turn(battle_engine, scheduler) -> None:
    battle_engine.fire(_free_cell(battle_engine))
    saved: GameState = battle_engine.state
    battle_engine.reset()
    battle_engine.restore(saved)
    assert battle_engine.opponent_turn_pending
    scheduler.advance(DELAY)
    assert battle_engine.state.turn is Side.PLAYER
    assert len(saved.player_board.shots_received) == 1


def test_start_battle_clears_leftover_outcome(engine_factory, full_board) -> None:
    engine = engine_factory()
    engine.restore(GameState(player_board=full_board, outcome=Outcome.PLAYER_WON))
    engine.start_battle()
    assert engine.state.outcome is Outcome.IN_PROGRESS
    assert engine.fire(_free_cell(engine)) != []
    assert engine.state.shot_count == 1

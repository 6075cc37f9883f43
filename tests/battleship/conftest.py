from __future__ import annotations

import random
from collections.abc import Callable

import pytest

from battleship.app.engine import GameEngine
from battleship.app.scheduler import Scheduler
from battleship.core.board import Board
from battleship.core.models import FLEET_ORDER, Coord, Orientation, cells_for
from battleship.infra.config import GameConfig

# Battleship, Cruiser, Destroyer, Submarine stacked on even rows from column 0.
FLEET_ROWS = (0, 2, 4, 6)


def make_full_board() -> Board:
    board = Board()
    for ship_type, row in zip(FLEET_ORDER, FLEET_ROWS):
        board.place_ship(ship_type, cells_for(ship_type, Coord(row, 0), Orientation.HORIZONTAL))
    return board


@pytest.fixture
def full_board() -> Board:
    return make_full_board()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1337)


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler()


@pytest.fixture
def engine_factory(scheduler: Scheduler) -> Callable[..., GameEngine]:
    def _make(seed: int = 1337, **config_overrides) -> GameEngine:
        config = GameConfig(**config_overrides)
        return GameEngine(rng=random.Random(seed), scheduler=scheduler, config=config)

    return _make


@pytest.fixture
def placed_engine(engine_factory) -> GameEngine:
    """Engine in placement with the standard fleet committed via taps."""
    engine = engine_factory()
    for row in FLEET_ROWS:
        engine.tap_placement(Coord(row, 0))
        engine.tap_placement(Coord(row, 0))
    return engine


@pytest.fixture
def battle_engine(placed_engine: GameEngine) -> GameEngine:
    placed_engine.start_battle()
    return placed_engine

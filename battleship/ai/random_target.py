"""Uniformly random opponent targeting."""

from __future__ import annotations

import random

from battleship.core.board import Board
from battleship.core.models import Coord

TARGETING_ATTEMPTS = 300


class RandomTargeting:
    """Pick shots uniformly over the grid, optionally skipping fired cells."""

    def __init__(
        self,
        rng: random.Random,
        *,
        avoid_repeats: bool = True,
        attempts: int = TARGETING_ATTEMPTS,
    ) -> None:
        self._rng = rng
        self._avoid_repeats = avoid_repeats
        self._attempts = max(1, attempts)

    @property
    def avoid_repeats(self) -> bool:
        return self._avoid_repeats

    def choose_shot(self, target: Board) -> Coord:
        """Return the next coordinate to fire at `target`.

        When every sample within the budget hits an already fired cell the last
        sample is returned anyway.
        """
        coord = self._sample(target.size)
        if not self._avoid_repeats:
            return coord
        for _ in range(self._attempts - 1):
            if not target.was_shot(coord):
                return coord
            coord = self._sample(target.size)
        return coord

    def _sample(self, size: int) -> Coord:
        return Coord(self._rng.randrange(size), self._rng.randrange(size))

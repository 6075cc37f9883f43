"""Engine exception types."""

from __future__ import annotations


class BattleshipError(Exception):
    """Base class for engine errors."""


class PlacementExhaustedError(BattleshipError, RuntimeError):
    """Random placement could not fit a ship within its retry budget."""

    def __init__(self, ship_type: str, attempts: int) -> None:
        super().__init__(f"Failed to place {ship_type} after {attempts} attempts.")
        self.ship_type = ship_type
        self.attempts = attempts


class SaveDecodeError(BattleshipError, ValueError):
    """Persisted record could not be decoded into a game state."""

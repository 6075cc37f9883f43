"""Best-effort save/restore use cases."""

from __future__ import annotations

import logging

import orjson

from battleship.core.errors import SaveDecodeError
from battleship.core.rules import GameState
from battleship.saves.repository import SaveRepository
from battleship.saves.schema import game_to_payload, payload_to_game

logger = logging.getLogger(__name__)


class SaveService:
    """Save and load the game without ever surfacing storage errors."""

    def __init__(self, repository: SaveRepository) -> None:
        self._repository = repository

    def save(self, state: GameState) -> bool:
        """Persist `state`; return False when the write failed."""
        try:
            self._repository.save_payload(game_to_payload(state))
        except (OSError, TypeError) as exc:
            logger.warning("game_save_failed path=%s error=%s", self._repository.path, exc, exc_info=True)
            return False
        logger.debug("game_saved path=%s", self._repository.path)
        return True

    def load(self) -> GameState | None:
        """Return the saved state, or None when missing or unreadable."""
        try:
            payload = self._repository.load_payload()
            if payload is None:
                return None
            state = payload_to_game(payload)
        except (OSError, orjson.JSONDecodeError, SaveDecodeError) as exc:
            logger.warning("game_load_failed path=%s error=%s", self._repository.path, exc, exc_info=True)
            return None
        logger.info("game_loaded path=%s screen=%s", self._repository.path, state.screen.value)
        return state

    def clear(self) -> None:
        try:
            self._repository.delete()
        except OSError:
            logger.warning("game_clear_failed path=%s", self._repository.path, exc_info=True)

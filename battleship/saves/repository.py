"""Persistence layer for the saved-game record."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import orjson


class SaveRepository:
    """Single JSON file holding the suspended game.

    Writes go to a sibling temp file that replaces the target in one
    `os.replace`, so a reader sees either the old record or the new one.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_payload(self) -> object | None:
        """Return the decoded JSON document, or None when no save exists.

        Raises orjson.JSONDecodeError on a corrupt file.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return None
        return orjson.loads(raw)

    def save_payload(self, payload: dict[str, object]) -> None:
        """Atomically overwrite the record."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = orjson.dumps(payload, option=orjson.OPT_INDENT_2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self) -> None:
        """Delete the record if it exists."""
        self._path.unlink(missing_ok=True)

"""Single-player battleship game-state engine."""

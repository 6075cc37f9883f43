"""Save-game codec and storage."""

"""Game engine orchestration, scheduling and render projection."""

"""Deferred task scheduler driven by the host clock."""

from __future__ import annotations

from collections.abc import Callable
from heapq import heappop, heappush

TaskCallback = Callable[[], None]


class Scheduler:
    """One-shot deferred callbacks.

    The scheduler owns no clock of its own; the host moves it forward with
    `advance` (relative) or `run_due` (absolute), and callbacks run synchronously
    on that caller's thread.
    """

    def __init__(self) -> None:
        self._now_seconds = 0.0
        self._next_task_id = 1
        self._heap: list[tuple[float, int, TaskCallback]] = []
        self._live: set[int] = set()

    @property
    def now_seconds(self) -> float:
        return self._now_seconds

    @property
    def pending_count(self) -> int:
        """Return count of tasks that will still run."""
        return len(self._live)

    def next_due_seconds(self) -> float | None:
        """Return the due time of the earliest live task, if any."""
        self._drop_cancelled_head()
        return self._heap[0][0] if self._heap else None

    def call_later(self, delay_seconds: float, callback: TaskCallback) -> int:
        """Schedule a one-shot callback after delay."""
        if delay_seconds < 0.0:
            raise ValueError("delay_seconds must be >= 0")
        task_id = self._next_task_id
        self._next_task_id += 1
        heappush(self._heap, (self._now_seconds + delay_seconds, task_id, callback))
        self._live.add(task_id)
        return task_id

    def cancel(self, task_id: int) -> None:
        """Cancel a scheduled task; unknown or finished ids are ignored."""
        self._live.discard(task_id)

    def advance(self, delta_seconds: float) -> int:
        """Advance the clock and run due callbacks."""
        if delta_seconds < 0.0:
            raise ValueError("delta_seconds must be >= 0")
        return self.run_due(self._now_seconds + delta_seconds)

    def run_due(self, now_seconds: float) -> int:
        """Run callbacks due at or before `now_seconds`; return how many ran."""
        if now_seconds < self._now_seconds:
            raise ValueError("now_seconds cannot move backwards")
        self._now_seconds = now_seconds
        executed = 0
        while self._heap and self._heap[0][0] <= now_seconds:
            _, task_id, callback = heappop(self._heap)
            if task_id not in self._live:
                continue
            self._live.discard(task_id)
            callback()
            executed += 1
        return executed

    def _drop_cancelled_head(self) -> None:
        while self._heap and self._heap[0][1] not in self._live:
            heappop(self._heap)

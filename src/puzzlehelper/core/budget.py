from __future__ import annotations

import threading
import time
from typing import Optional


class SearchBudget:
    """
    Cooperative cancellation shared by every branch of one search.

    Recursive searches call `spend()` on entry and unwind as soon as it
    returns False. The budget trips when:
      - `cancel()` was called (from any thread)
      - `max_seconds` of wall-clock time have elapsed since construction
      - more than `max_nodes` recursion entries have been spent
    """

    def __init__(self, *, max_seconds: Optional[float] = None, max_nodes: Optional[int] = None):
        self.max_seconds = max_seconds
        self.max_nodes = max_nodes
        self._start = time.perf_counter()
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self._nodes = 0

    @property
    def nodes(self) -> int:
        return self._nodes

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def exhausted(self) -> bool:
        return self._cancelled.is_set()

    def time_up(self) -> bool:
        return self.max_seconds is not None and (time.perf_counter() - self._start) >= self.max_seconds

    def spend(self) -> bool:
        if self._cancelled.is_set():
            return False
        with self._lock:
            self._nodes += 1
            over = self.max_nodes is not None and self._nodes > self.max_nodes
        if over or self.time_up():
            self._cancelled.set()
            return False
        return True

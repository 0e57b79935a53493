from __future__ import annotations

import heapq
from collections.abc import Callable
from typing import Any, Dict, List, Protocol, Tuple


class Scheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class VirtualScheduler:
    """Timer queue driven by explicit calls to :meth:`advance`.

    Timers due at the same instant fire in the order they were scheduled.
    Callbacks may schedule further timers; those fire within the same
    :meth:`advance` call when they fall inside the advanced window.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._next_id = 0
        self._queue: List[Tuple[int, int]] = []
        self._callbacks: Dict[int, Callable[[], None]] = {}

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        self._next_id += 1
        due = self.now_ms + max(int(delay_ms), 0)
        heapq.heappush(self._queue, (due, self._next_id))
        self._callbacks[self._next_id] = callback
        return self._next_id

    def cancel(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, ms: int) -> int:
        """Move virtual time forward by ``ms`` and fire due timers."""
        target = self.now_ms + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, handle = heapq.heappop(self._queue)
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue
            self.now_ms = due
            callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_all(self, limit: int = 10_000) -> int:
        fired = 0
        while self._callbacks and fired < limit:
            live = [item for item in self._queue if item[1] in self._callbacks]
            if not live:
                break
            due = min(live)[0]
            fired += self.advance(due - self.now_ms)
        return fired

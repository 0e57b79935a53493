from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Deque, Iterable, List, Optional, Tuple

from .models import GridCell
from .scheduling import Scheduler

logger = logging.getLogger(__name__)

DEFAULT_ITEM_DURATION_MS = 2000


class SequencerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"


class EmptySelectionError(ValueError):
    """Raised when a run is started without any selected positions."""


@dataclass(frozen=True)
class RunSnapshot:
    state: SequencerState
    processing: Optional[GridCell]
    completed: Tuple[GridCell, ...]
    pending: Tuple[GridCell, ...]
    total: int
    progress_percent: float

    @property
    def is_running(self) -> bool:
        return self.state in (SequencerState.RUNNING, SequencerState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.state is SequencerState.PAUSED

    @property
    def remaining(self) -> int:
        return self.total - len(self.completed)


SnapshotListener = Callable[[RunSnapshot], None]


class PlacementSequencer:
    """Simulated placement run over a snapshot of selected positions.

    One box is "processing" at a time for ``item_duration_ms``; the timer is
    owned by the injected scheduler. Pause and stop act on item boundaries: a
    paused run lets the in-flight box finish and then waits, while stop
    cancels the timer and discards everything.

    Examples
    --------
    >>> from palletizer_engine.scheduling import VirtualScheduler
    >>> clock = VirtualScheduler()
    >>> seq = PlacementSequencer(clock, item_duration_ms=10)
    >>> seq.start([GridCell(0, 0), GridCell(0, 1)])
    True
    >>> _ = clock.advance(20)
    >>> seq.state.value, seq.progress_percent
    ('completed', 100.0)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        item_duration_ms: int = DEFAULT_ITEM_DURATION_MS,
    ) -> None:
        if item_duration_ms < 0:
            raise ValueError("item_duration_ms must be non-negative")
        self._scheduler = scheduler
        self.item_duration_ms = int(item_duration_ms)
        self._state = SequencerState.IDLE
        self._pending: Deque[GridCell] = deque()
        self._processing: GridCell | None = None
        self._completed: List[GridCell] = []
        self._total = 0
        self._progress = 0.0
        self._timer: Any | None = None
        self._listeners: List[SnapshotListener] = []

    # -- observers -------------------------------------------------------

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state in (SequencerState.RUNNING, SequencerState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self._state is SequencerState.PAUSED

    @property
    def processing_cell(self) -> GridCell | None:
        return self._processing

    @property
    def completed_cells(self) -> Tuple[GridCell, ...]:
        return tuple(self._completed)

    @property
    def pending_cells(self) -> Tuple[GridCell, ...]:
        return tuple(self._pending)

    @property
    def total(self) -> int:
        return self._total

    @property
    def remaining(self) -> int:
        return self._total - len(self._completed)

    @property
    def progress_percent(self) -> float:
        return self._progress

    def snapshot(self) -> RunSnapshot:
        return RunSnapshot(
            state=self._state,
            processing=self._processing,
            completed=tuple(self._completed),
            pending=tuple(self._pending),
            total=self._total,
            progress_percent=self._progress,
        )

    def add_listener(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # -- commands --------------------------------------------------------

    def start(self, positions: Iterable[GridCell]) -> bool:
        if self.is_running:
            logger.info("Ignoring start request: a run is already %s", self._state.value)
            return False
        queue = list(dict.fromkeys(positions))
        if not queue:
            raise EmptySelectionError("Please select at least one box position")

        self._pending = deque(queue)
        self._completed = []
        self._processing = None
        self._total = len(queue)
        self._progress = 0.0
        self._state = SequencerState.RUNNING
        logger.debug("Run started with %d positions", self._total)
        self._begin_next()
        return True

    def pause(self) -> bool:
        if self._state is not SequencerState.RUNNING:
            return False
        self._state = SequencerState.PAUSED
        logger.debug("Run paused at %d/%d", len(self._completed), self._total)
        self._notify()
        return True

    def resume(self) -> bool:
        if self._state is not SequencerState.PAUSED:
            return False
        self._state = SequencerState.RUNNING
        logger.debug("Run resumed at %d/%d", len(self._completed), self._total)
        # An in-flight box keeps its timer; otherwise pick up the next one.
        if self._processing is None:
            self._begin_next()
        else:
            self._notify()
        return True

    def stop(self) -> bool:
        if self._state is SequencerState.IDLE:
            return False
        was = self._state
        self._clear_run()
        logger.debug("Run stopped from %s", was.value)
        self._notify()
        return True

    def reset(self) -> None:
        """Return to IDLE unconditionally, discarding any run."""
        self._clear_run()
        self._notify()

    # -- internals -------------------------------------------------------

    def _clear_run(self) -> None:
        if self._timer is not None:
            self._scheduler.cancel(self._timer)
            self._timer = None
        self._pending.clear()
        self._processing = None
        self._completed = []
        self._total = 0
        self._progress = 0.0
        self._state = SequencerState.IDLE

    def _begin_next(self) -> None:
        if not self._pending:
            self._complete_run()
            return
        self._processing = self._pending.popleft()
        logger.debug("Processing position %s", self._processing.key)
        self._timer = self._scheduler.schedule(self.item_duration_ms, self._on_item_done)
        self._notify()

    def _on_item_done(self) -> None:
        self._timer = None
        cell = self._processing
        if cell is None or not self.is_running:
            return
        self._processing = None
        self._completed.append(cell)
        self._progress = len(self._completed) / self._total * 100
        if not self._pending:
            self._complete_run()
            return
        if self._state is SequencerState.PAUSED:
            self._notify()
            return
        self._begin_next()

    def _complete_run(self) -> None:
        self._processing = None
        self._progress = 100.0
        self._state = SequencerState.COMPLETED
        logger.debug("Run completed: %d positions placed", len(self._completed))
        self._notify()

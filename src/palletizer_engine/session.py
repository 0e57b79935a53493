from __future__ import annotations

import logging
from dataclasses import dataclass

from .geometry import GridGeometry
from .models import GridCell
from .navigator import LayerNavigator
from .positions import PositionSet
from .scheduling import Scheduler
from .sequencer import DEFAULT_ITEM_DURATION_MS, PlacementSequencer, SequencerState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerStatistics:
    selected: int
    completed: int
    remaining: int
    current_layer: int
    max_layers: int

    @property
    def layer_label(self) -> str:
        return f"{self.current_layer} of {self.max_layers}"


class PalletizerSession:
    """State owned by one palletizer screen.

    Selections and run state belong to the current layer: every layer change
    clears the selection and drops any run, finished or not.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        rows: int,
        cols: int,
        max_layers: int,
        *,
        item_duration_ms: int = DEFAULT_ITEM_DURATION_MS,
        lock_navigation_during_run: bool = False,
    ) -> None:
        self.rows = rows
        self.cols = cols
        self.lock_navigation_during_run = lock_navigation_during_run
        self.positions = PositionSet(rows, cols)
        self.sequencer = PlacementSequencer(scheduler, item_duration_ms=item_duration_ms)
        self.navigator = LayerNavigator(max_layers)
        self.navigator.add_listener(self._on_layer_changed)

    @classmethod
    def from_geometry(
        cls,
        scheduler: Scheduler,
        geometry: GridGeometry,
        **kwargs,
    ) -> "PalletizerSession":
        return cls(scheduler, geometry.rows, geometry.cols, geometry.max_layers, **kwargs)

    @property
    def current_layer(self) -> int:
        return self.navigator.current_layer

    @property
    def max_layers(self) -> int:
        return self.navigator.max_layers

    def _on_layer_changed(self, old: int, new: int) -> None:
        logger.debug("Layer changed %d -> %d; resetting selections and run", old, new)
        self.positions.clear()
        self.sequencer.reset()

    def _navigation_allowed(self) -> bool:
        if self.lock_navigation_during_run and self.sequencer.is_running:
            logger.info("Layer change ignored while a run is active")
            return False
        return True

    def next_layer(self) -> bool:
        return self._navigation_allowed() and self.navigator.next()

    def previous_layer(self) -> bool:
        return self._navigation_allowed() and self.navigator.previous()

    def go_to_layer(self, layer: int) -> bool:
        return self._navigation_allowed() and self.navigator.go_to(layer)

    def click(self, row: int, col: int) -> bool | None:
        """Toggle a cell; returns the new membership, or None when ignored."""
        if self.sequencer.is_running:
            logger.debug("Ignoring click on %d-%d during a run", row, col)
            return None
        if self.sequencer.state is SequencerState.COMPLETED:
            self.sequencer.reset()
        return self.positions.toggle(row, col)

    def clear_selection(self) -> None:
        if self.sequencer.is_running:
            return
        self.positions.clear()

    def start(self) -> bool:
        return self.sequencer.start(self.positions.ordered())

    def apply_geometry(self, geometry: GridGeometry) -> None:
        if (geometry.rows, geometry.cols) != (self.rows, self.cols):
            self.sequencer.reset()
            self.rows, self.cols = geometry.rows, geometry.cols
            self.positions.resize(geometry.rows, geometry.cols)
        self.navigator.set_max_layers(geometry.max_layers)

    def cell_status(self, row: int, col: int) -> str:
        cell = GridCell(row, col)
        if self.sequencer.processing_cell == cell:
            return "processing"
        if cell in self.sequencer.completed_cells:
            return "completed"
        if self.positions.contains(row, col):
            return "selected"
        return "available"

    def statistics(self) -> LayerStatistics:
        selected = len(self.positions)
        completed = len(self.sequencer.completed_cells)
        return LayerStatistics(
            selected=selected,
            completed=completed,
            remaining=max(selected - completed, 0),
            current_layer=self.current_layer,
            max_layers=self.max_layers,
        )

    def status_text(self) -> str:
        seq = self.sequencer
        if seq.is_paused:
            return "Process paused"
        if seq.is_running:
            return (
                f"Processing layer {self.current_layer}... "
                f"{len(seq.completed_cells)}/{seq.total} boxes completed"
            )
        if seq.state is SequencerState.COMPLETED:
            return f"Layer {self.current_layer} completed: {seq.total} boxes placed"
        return ""

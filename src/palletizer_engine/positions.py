from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .models import GridCell

logger = logging.getLogger(__name__)

CellCallback = Callable[[GridCell], None]


class PositionSet:
    """Selected box positions of the active layer.

    Membership is keyed by ``(row, col)``; iteration follows selection order,
    which is also the order a run places the boxes in.
    """

    def __init__(self, rows: int | None = None, cols: int | None = None) -> None:
        self._rows = rows
        self._cols = cols
        self._cells: Dict[Tuple[int, int], GridCell] = {}
        self._listeners: List[Tuple[Optional[CellCallback], Optional[CellCallback]]] = []

    def add_listener(
        self,
        on_select: CellCallback | None = None,
        on_deselect: CellCallback | None = None,
    ) -> None:
        self._listeners.append((on_select, on_deselect))

    def _in_bounds(self, cell: GridCell) -> bool:
        if self._rows is not None and cell.row >= self._rows:
            return False
        if self._cols is not None and cell.col >= self._cols:
            return False
        return True

    def select(self, cell: GridCell) -> bool:
        if not self._in_bounds(cell):
            raise ValueError(
                f"cell {cell.key} outside grid {self._rows} x {self._cols}"
            )
        identity = (cell.row, cell.col)
        if identity in self._cells:
            return False
        self._cells[identity] = cell
        for on_select, _ in self._listeners:
            if on_select is not None:
                on_select(cell)
        return True

    def deselect(self, cell: GridCell) -> bool:
        removed = self._cells.pop((cell.row, cell.col), None)
        if removed is None:
            return False
        for _, on_deselect in self._listeners:
            if on_deselect is not None:
                on_deselect(removed)
        return True

    def toggle(self, row: int, col: int) -> bool:
        """Click semantics: deselect when selected, select otherwise.

        Returns the new membership of the cell.
        """
        cell = GridCell(row, col)
        if self.contains(row, col):
            self.deselect(cell)
            return False
        self.select(cell)
        return True

    def clear(self) -> None:
        for cell in list(self._cells.values()):
            self.deselect(cell)

    def contains(self, row: int, col: int) -> bool:
        return (row, col) in self._cells

    def __contains__(self, cell: object) -> bool:
        if not isinstance(cell, GridCell):
            return False
        return self.contains(cell.row, cell.col)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[GridCell]:
        return iter(list(self._cells.values()))

    def ordered(self) -> Tuple[GridCell, ...]:
        return tuple(self._cells.values())

    def resize(self, rows: int | None, cols: int | None) -> List[GridCell]:
        """Change the grid bounds; members falling outside are deselected."""
        self._rows = rows
        self._cols = cols
        dropped = [cell for cell in self._cells.values() if not self._in_bounds(cell)]
        for cell in dropped:
            self.deselect(cell)
        if dropped:
            logger.info("Dropped %d selections outside %s x %s grid", len(dropped), rows, cols)
        return dropped

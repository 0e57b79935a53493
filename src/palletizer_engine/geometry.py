from __future__ import annotations

import math
from dataclasses import dataclass

from .models import Dimensions


@dataclass(frozen=True)
class GridGeometry:
    rows: int = 0
    cols: int = 0
    boxes_per_layer: int = 0
    max_layers: int = 0
    efficiency_percent: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.rows == 0 or self.cols == 0


EMPTY_GEOMETRY = GridGeometry()


def _fit(available: float, size: float) -> int:
    if size <= 0 or available <= 0:
        return 0
    return int(math.floor(available / size))


def compute_grid(box: Dimensions, pallet: Dimensions) -> GridGeometry:
    """Compute the layer grid for ``box`` on ``pallet``.

    Any zero or negative dimension means "not configured yet" and gives the
    all-zero grid rather than an error.

    Examples
    --------
    >>> grid = compute_grid(Dimensions(300, 200, 150), Dimensions(1200, 800, 1500))
    >>> grid.rows, grid.cols, grid.boxes_per_layer, grid.max_layers
    (4, 4, 16, 10)
    """

    if not (box.is_configured and pallet.is_configured):
        return EMPTY_GEOMETRY

    cols = _fit(pallet.length, box.length)
    rows = _fit(pallet.width, box.width)
    if rows == 0 or cols == 0:
        rows = cols = 0
    boxes_per_layer = rows * cols
    max_layers = _fit(pallet.height, box.height)

    pallet_area = pallet.length * pallet.width
    if pallet_area > 0:
        efficiency = boxes_per_layer * box.length * box.width / pallet_area * 100
    else:
        efficiency = 0.0

    return GridGeometry(
        rows=rows,
        cols=cols,
        boxes_per_layer=boxes_per_layer,
        max_layers=max_layers,
        efficiency_percent=efficiency,
    )


def format_layout_summary(geometry: GridGeometry) -> str:
    return (
        f"{geometry.rows} x {geometry.cols} = {geometry.boxes_per_layer} boxes per layer"
    )


def format_efficiency(geometry: GridGeometry) -> str:
    return f"{geometry.efficiency_percent:.1f}%"

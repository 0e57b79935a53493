from __future__ import annotations

import numpy as np

from palletizer_engine.session import PalletizerSession

AVAILABLE = 0
SELECTED = 1
PROCESSING = 2
COMPLETED = 3

STATUS_NAMES = ("Available", "Selected", "Processing", "Completed")
STATUS_COLORS = ("white", "tab:blue", "gold", "tab:green")

STATUS_CODES = {
    "available": AVAILABLE,
    "selected": SELECTED,
    "processing": PROCESSING,
    "completed": COMPLETED,
}


def status_matrix(session: PalletizerSession) -> np.ndarray:
    """Per-cell status codes of the session grid, shape ``(rows, cols)``."""
    grid = np.full((session.rows, session.cols), AVAILABLE, dtype=np.int8)
    for r in range(session.rows):
        for c in range(session.cols):
            grid[r, c] = STATUS_CODES[session.cell_status(r, c)]
    return grid

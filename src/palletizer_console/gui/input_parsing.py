import logging
from typing import Callable

import tkinter as tk
from tkinter import messagebox

from palletizer_engine.units import parse_float

logger = logging.getLogger(__name__)


def parse_dim(
    var: tk.Variable | str,
    *,
    field: str = "",
    on_error: Callable[[str], None] | None = None,
) -> float:
    """Parse a dimension in millimetres from a Tk variable or string.

    Invalid input yields ``0.0``; negative values are clamped to ``0.0``.
    When ``on_error`` is given it receives the field name instead of a
    warning popup being shown.
    """

    try:
        raw_value = var.get() if hasattr(var, "get") else var
        val = parse_float(str(raw_value))
        return max(0.0, val)
    except ValueError:
        if on_error is not None:
            try:
                on_error(field)
            except Exception:
                logger.exception("parse_dim error callback failed")
        else:
            messagebox.showwarning("Invalid value", "The value is not a number. Using 0.")
        return 0.0

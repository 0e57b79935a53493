from __future__ import annotations

from collections.abc import Callable
from typing import Any


class TkScheduler:
    """Run sequencer timers on the Tk event loop via ``after``."""

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> str:
        return self._widget.after(int(delay_ms), callback)

    def cancel(self, handle: str) -> None:
        self._widget.after_cancel(handle)

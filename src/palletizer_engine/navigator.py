from __future__ import annotations

from typing import Callable, List

LayerListener = Callable[[int, int], None]


class LayerNavigator:
    """Bounds-checked current layer, 1-based.

    With ``max_layers == 0`` (pallet not configured) the current layer is 0
    and every move is a no-op.
    """

    def __init__(self, max_layers: int, current_layer: int = 1) -> None:
        self._max_layers = max(int(max_layers), 0)
        self._current = self._clamp(current_layer)
        self._listeners: List[LayerListener] = []

    @property
    def current_layer(self) -> int:
        return self._current

    @property
    def max_layers(self) -> int:
        return self._max_layers

    @property
    def at_first(self) -> bool:
        return self._current <= 1

    @property
    def at_last(self) -> bool:
        return self._current >= self._max_layers

    def add_listener(self, listener: LayerListener) -> None:
        self._listeners.append(listener)

    def _clamp(self, layer: int) -> int:
        if self._max_layers == 0:
            return 0
        return min(max(int(layer), 1), self._max_layers)

    def _move(self, layer: int) -> bool:
        new = self._clamp(layer)
        if new == self._current:
            return False
        old = self._current
        self._current = new
        for listener in list(self._listeners):
            listener(old, new)
        return True

    def go_to(self, layer: int) -> bool:
        return self._move(layer)

    def next(self) -> bool:
        if self.at_last:
            return False
        return self._move(self._current + 1)

    def previous(self) -> bool:
        if self.at_first:
            return False
        return self._move(self._current - 1)

    def set_max_layers(self, max_layers: int) -> bool:
        """Change the upper bound; returns True when the layer had to move."""
        self._max_layers = max(int(max_layers), 0)
        if self._max_layers and self._current == 0:
            return self._move(1)
        return self._move(self._current)

    def fraction(self) -> float:
        if self._max_layers == 0:
            return 0.0
        return self._current / self._max_layers

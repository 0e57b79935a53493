from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .units import MM, coerce_dimension

DIMENSION_FIELDS = ("length", "width", "height")


@dataclass(frozen=True)
class Dimensions:
    """Box or pallet dimensions in millimetres."""

    length: MM = 0.0
    width: MM = 0.0
    height: MM = 0.0

    @property
    def is_configured(self) -> bool:
        return all(
            math.isfinite(value) and value > 0
            for value in (self.length, self.width, self.height)
        )

    def replace_field(self, name: str, value: object) -> "Dimensions":
        if name not in DIMENSION_FIELDS:
            raise ValueError(f"unknown dimension field: {name!r}")
        return replace(self, **{name: coerce_dimension(value)})

    def to_dict(self) -> dict:
        return {"length": self.length, "width": self.width, "height": self.height}


@dataclass(frozen=True, order=True)
class GridCell:
    """One box slot on a layer; identity is the ``(row, col)`` pair."""

    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError(f"grid coordinates must be non-negative: {self.row}, {self.col}")

    @property
    def key(self) -> str:
        return f"{self.row}-{self.col}"

    def label(self) -> str:
        return f"{self.row + 1},{self.col + 1}"

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Tuple, Union


class Pattern(str, Enum):
    STANDARD = "standard"
    CHECKERBOARD = "checkerboard"
    ROWS = "rows"
    COLUMNS = "columns"
    SPIRAL = "spiral"
    UNKNOWN = "unknown"


class Category(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    UNRECOGNIZED = "unrecognized"


PatternLike = Union[Pattern, str]

PATTERN_ORDER = [
    Pattern.STANDARD,
    Pattern.CHECKERBOARD,
    Pattern.ROWS,
    Pattern.COLUMNS,
    Pattern.SPIRAL,
]

DISPLAY_MAP = {
    Pattern.STANDARD: "Standard Pattern",
    Pattern.CHECKERBOARD: "Checkerboard",
    Pattern.ROWS: "Alternating Rows",
    Pattern.COLUMNS: "Alternating Columns",
    Pattern.SPIRAL: "Spiral Pattern",
}

UNKNOWN_LABEL = "Unknown"

# Second colour differs per pattern, the first is always blue.
_SECONDARY_COLORS = {
    Pattern.CHECKERBOARD: "tab:green",
    Pattern.ROWS: "tab:purple",
    Pattern.COLUMNS: "tab:orange",
    Pattern.SPIRAL: "tab:red",
}

CATEGORY_COLORS: Dict[Category, str] = {
    Category.A: "tab:blue",
    Category.B: "tab:green",
    Category.C: "gold",
    Category.UNRECOGNIZED: "tab:gray",
}


def parse_pattern(name: PatternLike) -> Pattern:
    if isinstance(name, Pattern):
        return name
    try:
        pattern = Pattern(str(name).strip().lower())
    except ValueError:
        return Pattern.UNKNOWN
    return pattern


def color_for(pattern: PatternLike, row: int, col: int) -> Category:
    """Return the category of cell ``(row, col)`` under ``pattern``.

    Unrecognised pattern names map to ``Category.UNRECOGNIZED`` so that
    configurations carrying newer pattern names still render.
    """

    kind = parse_pattern(pattern)
    if kind is Pattern.STANDARD:
        return Category.A
    if kind is Pattern.CHECKERBOARD:
        return Category.A if (row + col) % 2 == 0 else Category.B
    if kind is Pattern.ROWS:
        return Category.A if row % 2 == 0 else Category.B
    if kind is Pattern.COLUMNS:
        return Category.A if col % 2 == 0 else Category.B
    if kind is Pattern.SPIRAL:
        ring = min(row, col) % 3
        return (Category.A, Category.B, Category.C)[ring]
    return Category.UNRECOGNIZED


def display_for(pattern: PatternLike) -> str:
    return DISPLAY_MAP.get(parse_pattern(pattern), UNKNOWN_LABEL)


def display_color(pattern: PatternLike, category: Category) -> str:
    kind = parse_pattern(pattern)
    if category is Category.B:
        return _SECONDARY_COLORS.get(kind, CATEGORY_COLORS[Category.B])
    if category is Category.C:
        return "gold"
    return CATEGORY_COLORS[category]


def pattern_choices() -> List[Tuple[str, str]]:
    return [(pattern.value, DISPLAY_MAP[pattern]) for pattern in PATTERN_ORDER]


def category_grid(pattern: PatternLike, rows: int, cols: int) -> List[List[Category]]:
    return [[color_for(pattern, r, c) for c in range(cols)] for r in range(rows)]

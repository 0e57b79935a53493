from __future__ import annotations

import math

MM = float


def parse_float(value: str) -> float:
    text = value.strip()
    if not text:
        raise ValueError("empty input")
    text = text.replace(",", ".")
    return float(text)


def coerce_dimension(value: object) -> float:
    """Return ``value`` as a non-negative millimetre value.

    Anything that does not parse as a finite number, or is negative, becomes
    ``0.0`` so that geometry sees an unconfigured field instead of an error.
    """

    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = parse_float(str(value))
        except ValueError:
            return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict

from .models import DIMENSION_FIELDS, Dimensions


class MalformedConfigError(ValueError):
    """Raised when an imported configuration cannot be used."""


@dataclass(frozen=True)
class PalletConfig:
    box: Dimensions
    pallet: Dimensions
    pattern: str
    timestamp: str = ""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(now: datetime) -> str:
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_dimensions(value: Any, label: str) -> Dimensions:
    if not isinstance(value, dict):
        raise MalformedConfigError(f"{label} must be an object")
    parsed: Dict[str, float] = {}
    for name in DIMENSION_FIELDS:
        raw = value.get(name)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise MalformedConfigError(f"{label}.{name} must be a number")
        number = float(raw)
        if not math.isfinite(number) or number < 0:
            raise MalformedConfigError(f"{label}.{name} must be a non-negative number")
        parsed[name] = number
    return Dimensions(**parsed)


def config_to_dict(config: PalletConfig) -> Dict[str, Any]:
    return {
        "boxDimensions": config.box.to_dict(),
        "palletDimensions": config.pallet.to_dict(),
        "selectedPattern": config.pattern,
        "timestamp": config.timestamp,
    }


def build_export(
    box: Dimensions,
    pallet: Dimensions,
    pattern: str,
    now: datetime | None = None,
) -> PalletConfig:
    return PalletConfig(box=box, pallet=pallet, pattern=pattern, timestamp=_timestamp(now or _now()))


def config_from_dict(data: Any, fallback: PalletConfig) -> PalletConfig:
    """Validate an imported configuration.

    Missing or null sections keep the values from ``fallback``. Present
    sections must be well formed; pattern names are kept even when not
    recognised so newer configurations still load.
    """

    if not isinstance(data, dict):
        raise MalformedConfigError("configuration must be a JSON object")

    box = fallback.box
    if data.get("boxDimensions") is not None:
        box = _parse_dimensions(data["boxDimensions"], "boxDimensions")

    pallet = fallback.pallet
    if data.get("palletDimensions") is not None:
        pallet = _parse_dimensions(data["palletDimensions"], "palletDimensions")

    pattern = fallback.pattern
    raw_pattern = data.get("selectedPattern")
    if raw_pattern is not None:
        if not isinstance(raw_pattern, str) or not raw_pattern:
            raise MalformedConfigError("selectedPattern must be a non-empty string")
        pattern = raw_pattern

    timestamp = data.get("timestamp") or ""
    if not isinstance(timestamp, str):
        timestamp = str(timestamp)

    return PalletConfig(box=box, pallet=pallet, pattern=pattern, timestamp=timestamp)


def dump_config_text(config: PalletConfig) -> str:
    return json.dumps(config_to_dict(config), indent=2, ensure_ascii=False)


def export_filename(now: datetime | None = None) -> str:
    stamp = (now or _now()).date().isoformat()
    return f"pallet-config-{stamp}.json"

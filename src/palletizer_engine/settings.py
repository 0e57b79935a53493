from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from functools import lru_cache
from typing import Any, Dict

import yaml

from .models import Dimensions
from .patterns import Pattern, parse_pattern
from .sequencer import DEFAULT_ITEM_DURATION_MS
from .units import coerce_dimension

logger = logging.getLogger(__name__)

SETTINGS_ENV = "PALLETIZER_SETTINGS"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    item_duration_ms: int = DEFAULT_ITEM_DURATION_MS
    default_box: Dimensions = field(default_factory=lambda: Dimensions(300, 200, 150))
    default_pallet: Dimensions = field(default_factory=lambda: Dimensions(1200, 800, 1500))
    default_pattern: str = Pattern.STANDARD.value
    lock_navigation_during_run: bool = True
    save_delay_ms: int = 1000
    saved_display_ms: int = 2000
    log_level: str = "INFO"


DEFAULT_SETTINGS = Settings()


def settings_path() -> str:
    env_path = os.getenv(SETTINGS_ENV)
    if env_path:
        return os.path.abspath(os.path.expanduser(env_path))
    return os.path.join(os.path.dirname(__file__), "settings.yaml")


def _as_dimensions(value: Any, default: Dimensions) -> Dimensions:
    if not isinstance(value, dict):
        raise ValueError(f"expected a mapping of dimensions, got {value!r}")
    return Dimensions(
        length=coerce_dimension(value.get("length", default.length)),
        width=coerce_dimension(value.get("width", default.width)),
        height=coerce_dimension(value.get("height", default.height)),
    )


def _as_ms(value: Any) -> int:
    number = int(value)
    if number < 0:
        raise ValueError(f"duration must be non-negative: {number}")
    return number


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"expected true/false, got {value!r}")


def _as_level(value: Any) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"unknown log level {value!r}")
    return level


def _as_pattern(value: Any) -> str:
    pattern = parse_pattern(str(value))
    if pattern is Pattern.UNKNOWN:
        raise ValueError(f"unknown pattern {value!r}")
    return pattern.value


_CONVERTERS = {
    "item_duration_ms": _as_ms,
    "default_box": lambda v: _as_dimensions(v, DEFAULT_SETTINGS.default_box),
    "default_pallet": lambda v: _as_dimensions(v, DEFAULT_SETTINGS.default_pallet),
    "default_pattern": _as_pattern,
    "lock_navigation_during_run": _as_bool,
    "save_delay_ms": _as_ms,
    "saved_display_ms": _as_ms,
    "log_level": _as_level,
}


def settings_from_mapping(data: Dict[str, Any]) -> Settings:
    """Build settings from a parsed mapping, keeping defaults for bad keys."""
    values: Dict[str, Any] = {}
    known = {f.name for f in fields(Settings)}
    for key, raw in data.items():
        if key not in known:
            logger.warning("Ignoring unknown setting %r", key)
            continue
        try:
            values[key] = _CONVERTERS[key](raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Invalid value for setting %r: %s", key, exc)
    return Settings(**values)


@lru_cache(maxsize=None)
def load_settings() -> Settings:
    """Load ``settings.yaml``; missing or unreadable files give defaults."""
    path = settings_path()
    if not os.path.exists(path):
        return DEFAULT_SETTINGS
    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        logger.exception("Failed to read settings from %s", path)
        return DEFAULT_SETTINGS
    if not isinstance(loaded, dict):
        logger.warning("Settings file %s is not a mapping; using defaults", path)
        return DEFAULT_SETTINGS
    return settings_from_mapping(loaded)

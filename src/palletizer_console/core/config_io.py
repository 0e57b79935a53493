from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any

from palletizer_engine.config_format import (
    MalformedConfigError,
    PalletConfig,
    dump_config_text,
)


def get_config_dir() -> str:
    env_dir = os.getenv("PALLETIZER_CONFIG_DIR")
    if env_dir:
        return str(Path(env_dir).expanduser().resolve())
    argv_path = Path(sys.argv[0]) if sys.argv[0] else None
    if argv_path and argv_path.is_file():
        base_dir = argv_path.parent
    else:
        base_dir = Path.cwd()
    default_dir = base_dir / "data" / "pallet_configs"
    return str(default_dir.resolve())


def ensure_config_dir() -> str:
    path = Path(get_config_dir())
    path.mkdir(parents=True, exist_ok=True)
    return str(path)


def save_config(path: str, config: PalletConfig) -> str:
    target = Path(path)
    if not target.is_absolute():
        target = Path(ensure_config_dir()) / target
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(dump_config_text(config))
    return str(target)


def read_config_data(path: str) -> Any:
    """Return the decoded JSON of a configuration file, not yet validated."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedConfigError(f"Invalid configuration file: {exc}") from exc


__all__ = [
    "ensure_config_dir",
    "get_config_dir",
    "read_config_data",
    "save_config",
]

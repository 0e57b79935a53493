"""Application state behind the console tabs."""

from .config_io import read_config_data, save_config

__all__ = ["read_config_data", "save_config"]

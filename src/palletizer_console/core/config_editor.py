from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Literal

from palletizer_engine.config_format import (
    PalletConfig,
    build_export,
    config_from_dict,
)
from palletizer_engine.geometry import GridGeometry, compute_grid
from palletizer_engine.models import Dimensions
from palletizer_engine.scheduling import Scheduler
from palletizer_engine.settings import Settings

logger = logging.getLogger(__name__)

SaveStatus = Literal["idle", "saving", "saved"]


class ConfigEditor:
    """Box/pallet dimensions and pattern edited on the Boxes tab."""

    def __init__(self, scheduler: Scheduler, settings: Settings) -> None:
        self._scheduler = scheduler
        self._settings = settings
        self.box: Dimensions = settings.default_box
        self.pallet: Dimensions = settings.default_pallet
        self.pattern: str = settings.default_pattern
        self.has_unsaved_changes = False
        self.save_status: SaveStatus = "idle"
        self._save_timer: Any | None = None
        self._listeners: List[Callable[[], None]] = []

    def add_listener(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _changed(self, dirty: bool = True) -> None:
        if dirty:
            self.has_unsaved_changes = True
        for listener in list(self._listeners):
            listener()

    def set_box_field(self, name: str, value: object) -> None:
        self.box = self.box.replace_field(name, value)
        self._changed()

    def set_pallet_field(self, name: str, value: object) -> None:
        self.pallet = self.pallet.replace_field(name, value)
        self._changed()

    def set_pattern(self, pattern: str) -> None:
        self.pattern = pattern
        self._changed()

    def geometry(self) -> GridGeometry:
        return compute_grid(self.box, self.pallet)

    def current_config(self) -> PalletConfig:
        return PalletConfig(box=self.box, pallet=self.pallet, pattern=self.pattern)

    def save(self) -> None:
        """Acknowledge a save: saving, then saved, then back to idle."""
        if self._save_timer is not None:
            self._scheduler.cancel(self._save_timer)
        self.save_status = "saving"
        self._save_timer = self._scheduler.schedule(
            self._settings.save_delay_ms, self._on_saved
        )
        self._changed(dirty=False)

    def _on_saved(self) -> None:
        self.save_status = "saved"
        self.has_unsaved_changes = False
        logger.info("Configuration saved")
        self._save_timer = self._scheduler.schedule(
            self._settings.saved_display_ms, self._on_saved_shown
        )
        self._changed(dirty=False)

    def _on_saved_shown(self) -> None:
        self._save_timer = None
        self.save_status = "idle"
        self._changed(dirty=False)

    def reset(self) -> None:
        self.box = self._settings.default_box
        self.pallet = self._settings.default_pallet
        self.pattern = self._settings.default_pattern
        self.has_unsaved_changes = False
        self._changed(dirty=False)

    def export_config(self, now: datetime | None = None) -> PalletConfig:
        return build_export(self.box, self.pallet, self.pattern, now)

    def import_config(self, data: Any) -> PalletConfig:
        """Apply an imported configuration; nothing changes when it is malformed."""
        config = config_from_dict(data, self.current_config())
        self.apply_config(config)
        return config

    def apply_config(self, config: PalletConfig) -> None:
        self.box = config.box
        self.pallet = config.pallet
        self.pattern = config.pattern
        self._changed()

"""Layer placement engine for the palletizer console."""

from .config_format import MalformedConfigError, PalletConfig
from .geometry import GridGeometry, compute_grid
from .models import Dimensions, GridCell
from .navigator import LayerNavigator
from .patterns import Category, Pattern, color_for
from .positions import PositionSet
from .scheduling import Scheduler, VirtualScheduler
from .sequencer import (
    EmptySelectionError,
    PlacementSequencer,
    RunSnapshot,
    SequencerState,
)
from .session import LayerStatistics, PalletizerSession

__all__ = [
    "Category",
    "Dimensions",
    "EmptySelectionError",
    "GridCell",
    "GridGeometry",
    "LayerNavigator",
    "LayerStatistics",
    "MalformedConfigError",
    "PalletConfig",
    "PalletizerSession",
    "Pattern",
    "PlacementSequencer",
    "PositionSet",
    "RunSnapshot",
    "Scheduler",
    "SequencerState",
    "VirtualScheduler",
    "color_for",
    "compute_grid",
]

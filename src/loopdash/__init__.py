"""
Loopdash - layout engine for the artist analytics dashboard.

Places widgets on a 12-column grid, derives responsive layouts per
viewport, and persists the arrangement per usage mode.
"""

from __future__ import annotations

from ._version import __version__

# Re-export commonly used types for convenience
from .core.errors import (
    ConfigError,
    LayoutFormatError,
    LoopdashError,
    PersistenceError,
    UnknownWidgetError,
)
from .core.modes import Mode
from .layout_engine import LayoutStore, WidgetPlacement

__all__ = [
    "__version__",
    "ConfigError",
    "LayoutFormatError",
    "LayoutStore",
    "LoopdashError",
    "Mode",
    "PersistenceError",
    "UnknownWidgetError",
    "WidgetPlacement",
]

"""Core building blocks shared by the layout engine and the CLI."""

from loopdash.core.config import DashboardConfig, load_config
from loopdash.core.errors import (
    ConfigError,
    LayoutFormatError,
    LoopdashError,
    PersistenceError,
    UnknownWidgetError,
)
from loopdash.core.modes import DEFAULT_MODE, Mode, resolve_mode

__all__ = [
    "ConfigError",
    "DEFAULT_MODE",
    "DashboardConfig",
    "LayoutFormatError",
    "LoopdashError",
    "Mode",
    "PersistenceError",
    "UnknownWidgetError",
    "load_config",
    "resolve_mode",
]

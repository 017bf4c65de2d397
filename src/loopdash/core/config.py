"""
Configuration loading for ``loopdash.toml``.

Every table and key is optional; a missing file yields the defaults the
dashboard ships with.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loopdash.core.errors import ConfigError, ErrorContext

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "loopdash.toml"

DEFAULT_FULL_WIDTH_TYPES = ("global-map", "ai-todo", "mc-chat", "concerts")

# The logical grid is fixed; breakpoints scale spans down from it at render time
GRID_COLUMNS = 12


# =============================================================================
# Grid Configuration
# =============================================================================


@dataclass(frozen=True)
class GridConfig:
    """Logical grid used by the placement engine."""

    columns: int = GRID_COLUMNS
    regular_width: int = 6  # Two regular widgets fill one row
    lookback_rows: int = 6  # Rows above the bottom edge scanned for free space
    full_width_types: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_FULL_WIDTH_TYPES)
    )

    def __post_init__(self) -> None:
        if self.columns != GRID_COLUMNS:
            raise ConfigError(
                f"grid columns is fixed at {GRID_COLUMNS}, got {self.columns}",
                ErrorContext("grid", "columns"),
            )
        if not 1 <= self.regular_width <= self.columns:
            raise ConfigError(
                f"regular_width must be between 1 and {self.columns}, got {self.regular_width}",
                ErrorContext("grid", "regular_width"),
            )

    def is_full_width(self, widget_type: str) -> bool:
        return widget_type in self.full_width_types


# =============================================================================
# Breakpoint Configuration
# =============================================================================


@dataclass(frozen=True)
class BreakpointConfig:
    """Viewport thresholds (px) and column counts per breakpoint."""

    md_min_width: int = 768
    lg_min_width: int = 1024
    sm_columns: int = 4
    md_columns: int = 8


# =============================================================================
# Storage Configuration
# =============================================================================


@dataclass(frozen=True)
class StorageConfig:
    """Where the persisted layout lives."""

    path: Path = Path(".loopdash") / "state.json"
    layout_key: str = "loop-dashboard-layout"
    custom_layouts_key: str = "loop-custom-layouts"


@dataclass(frozen=True)
class DashboardConfig:
    """Top-level configuration."""

    grid: GridConfig = field(default_factory=GridConfig)
    breakpoints: BreakpointConfig = field(default_factory=BreakpointConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    default_mode: str = "standard"


def _positive_int(table: dict[str, Any], key: str, default: int, *, source: str) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(
            f"'{key}' must be a positive integer, got {value!r}",
            ErrorContext(source, key),
        )
    return value


def _string(table: dict[str, Any], key: str, default: str, *, source: str) -> str:
    value = table.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(
            f"'{key}' must be a non-empty string, got {value!r}",
            ErrorContext(source, key),
        )
    return value


def _parse_grid(data: dict[str, Any], source: str) -> GridConfig:
    columns = _positive_int(data, "columns", GRID_COLUMNS, source=source)
    if columns != GRID_COLUMNS:
        raise ConfigError(
            f"grid columns is fixed at {GRID_COLUMNS}, got {columns}",
            ErrorContext(source, "grid"),
        )
    regular_width = _positive_int(data, "regular_width", 6, source=source)
    if regular_width > columns:
        raise ConfigError(
            f"regular_width ({regular_width}) cannot exceed columns ({columns})",
            ErrorContext(source, "grid"),
        )

    full_width = data.get("full_width_types", list(DEFAULT_FULL_WIDTH_TYPES))
    if not isinstance(full_width, list) or not all(isinstance(t, str) for t in full_width):
        raise ConfigError(
            "full_width_types must be a list of widget type strings",
            ErrorContext(source, "grid"),
        )

    return GridConfig(
        columns=columns,
        regular_width=regular_width,
        lookback_rows=_positive_int(data, "lookback_rows", 6, source=source),
        full_width_types=frozenset(full_width),
    )


def _parse_breakpoints(data: dict[str, Any], source: str) -> BreakpointConfig:
    config = BreakpointConfig(
        md_min_width=_positive_int(data, "md_min_width", 768, source=source),
        lg_min_width=_positive_int(data, "lg_min_width", 1024, source=source),
        sm_columns=_positive_int(data, "sm_columns", 4, source=source),
        md_columns=_positive_int(data, "md_columns", 8, source=source),
    )
    if config.md_min_width >= config.lg_min_width:
        raise ConfigError(
            "md_min_width must be smaller than lg_min_width",
            ErrorContext(source, "breakpoints"),
        )
    return config


def load_config(path: Path) -> DashboardConfig:
    """
    Load configuration from a TOML file.

    Args:
        path: Path to ``loopdash.toml``

    Returns:
        Parsed configuration; defaults when the file does not exist

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    if not path.exists():
        logger.debug("No config at %s, using defaults", path)
        return DashboardConfig()

    source = str(path)
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML: {exc}", ErrorContext(source)) from exc

    storage_data = data.get("storage", {})
    dashboard_data = data.get("dashboard", {})

    # Relative storage paths resolve against the config file's directory
    storage_path = Path(_string(storage_data, "path", str(StorageConfig.path), source=source))
    if not storage_path.is_absolute():
        storage_path = path.parent / storage_path

    return DashboardConfig(
        grid=_parse_grid(data.get("grid", {}), source),
        breakpoints=_parse_breakpoints(data.get("breakpoints", {}), source),
        storage=StorageConfig(
            path=storage_path,
            layout_key=_string(
                storage_data, "layout_key", StorageConfig.layout_key, source=source
            ),
            custom_layouts_key=_string(
                storage_data, "custom_layouts_key", StorageConfig.custom_layouts_key, source=source
            ),
        ),
        default_mode=_string(dashboard_data, "default_mode", "standard", source=source),
    )


def find_config(start: Path) -> Path | None:
    """Walk up from ``start`` looking for ``loopdash.toml``."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


__all__ = [
    "BreakpointConfig",
    "CONFIG_FILENAME",
    "GRID_COLUMNS",
    "DashboardConfig",
    "GridConfig",
    "StorageConfig",
    "find_config",
    "load_config",
]

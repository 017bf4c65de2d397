"""
Loopdash Layout Engine.

Decides where dashboard widgets go and how the grid is drawn per viewport.

Key components:
- Placement (placement.py)
- Breakpoint resolution (breakpoints.py)
- Duplicate resolution (duplicates.py)
- Add-widget placeholder (placeholder.py)
- Mode templates (templates.py)
- Persistence (persistence.py)
- Layout store (store.py)
"""

from loopdash.layout_engine.breakpoints import (
    classify,
    columns_for,
    compute_responsive_span,
    derive_breakpoint_layout,
    is_compact,
)
from loopdash.layout_engine.duplicates import cleanup_duplicates, duplicate_types
from loopdash.layout_engine.persistence import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    decode_layout,
    encode_layout,
)
from loopdash.layout_engine.placeholder import find_placeholder_slot
from loopdash.layout_engine.placement import (
    RowOccupancyIndex,
    compute_placement,
    find_overlaps,
    max_bottom,
)
from loopdash.layout_engine.store import LayoutStore
from loopdash.layout_engine.templates import TEMPLATES, template_for, template_types
from loopdash.layout_engine.types import (
    Breakpoint,
    CleanupResult,
    LayoutRecord,
    MutationResult,
    MutationStatus,
    Placement,
    ResponsiveCell,
    WidgetPlacement,
)

__all__ = [
    # Core functions
    "compute_placement",
    "max_bottom",
    "find_overlaps",
    "RowOccupancyIndex",
    "classify",
    "columns_for",
    "compute_responsive_span",
    "derive_breakpoint_layout",
    "is_compact",
    "cleanup_duplicates",
    "duplicate_types",
    "find_placeholder_slot",
    # Templates
    "TEMPLATES",
    "template_for",
    "template_types",
    # Persistence
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "encode_layout",
    "decode_layout",
    # Store
    "LayoutStore",
    # Types
    "Breakpoint",
    "CleanupResult",
    "LayoutRecord",
    "MutationResult",
    "MutationStatus",
    "Placement",
    "ResponsiveCell",
    "WidgetPlacement",
]

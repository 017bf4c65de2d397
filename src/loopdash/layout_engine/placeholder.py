"""
Add-widget placeholder slot.

The dashboard shows an "Add Widget" tile in the first half-empty row so a
second regular widget can be dropped next to a lone one.
"""

from __future__ import annotations

from collections.abc import Sequence

from loopdash.core.config import GridConfig
from loopdash.layout_engine.placement import max_bottom
from loopdash.layout_engine.types import Placement, WidgetPlacement

PLACEHOLDER_HEIGHT = 4
# Widgets at least this wide count as full-width even when their type is regular
FULL_WIDTH_THRESHOLD = 10


def _rows_by_occupation(layout: Sequence[WidgetPlacement]) -> dict[int, list[WidgetPlacement]]:
    """Group widgets by every row they cover, not just their starting row."""
    rows: dict[int, list[WidgetPlacement]] = {}
    for widget in layout:
        for row in range(widget.y, widget.bottom):
            rows.setdefault(row, []).append(widget)
    return rows


def find_placeholder_slot(
    layout: Sequence[WidgetPlacement],
    *,
    config: GridConfig | None = None,
) -> Placement | None:
    """
    Where to draw the add-widget tile, or None when no row is half-empty.

    Examples:
        >>> find_placeholder_slot([])
        Placement(x=0, y=0, w=6, h=4)
    """
    config = config or GridConfig()
    if not layout:
        return Placement(x=0, y=0, w=config.regular_width, h=PLACEHOLDER_HEIGHT)

    max_edge = config.columns - config.regular_width
    rows = _rows_by_occupation(layout)
    for row in sorted(rows):
        widgets = rows[row]
        if any(config.is_full_width(w.type) or w.w >= FULL_WIDTH_THRESHOLD for w in widgets):
            continue
        edge = max(w.right for w in widgets)
        if 0 < edge <= max_edge:
            return Placement(x=edge, y=row, w=config.columns - edge, h=PLACEHOLDER_HEIGHT)
    return None


def fallback_slot(layout: Sequence[WidgetPlacement], *, config: GridConfig | None = None) -> Placement:
    """Bottom-of-board slot used when the caller always wants a tile."""
    config = config or GridConfig()
    return Placement(x=0, y=max_bottom(layout), w=config.regular_width, h=PLACEHOLDER_HEIGHT)


__all__ = ["FULL_WIDTH_THRESHOLD", "PLACEHOLDER_HEIGHT", "fallback_slot", "find_placeholder_slot"]

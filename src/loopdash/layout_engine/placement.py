"""
Placement engine.

Decides where a newly added widget lands on the 12-column grid.

Two widget classes:
- Full-width types always append a new full-width row at the bottom.
- Regular types are forced to the configured regular width and packed
  into the earliest recent row that still has room, scanning only a
  bounded window of rows above the bottom edge so long-abandoned gaps
  are never refilled.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from loopdash.core.config import GridConfig
from loopdash.layout_engine.types import Placement, WidgetPlacement
from loopdash.registry import GridSize

logger = logging.getLogger(__name__)


def max_bottom(widgets: Iterable[WidgetPlacement]) -> int:
    """Lowest occupied edge (max ``y + h``), 0 for an empty layout."""
    return max((w.bottom for w in widgets), default=0)


class RowOccupancyIndex:
    """
    Sparse map from starting row to the right-most occupied column.

    Only rows inside ``[floor, ceiling]`` are indexed. Rows where no widget
    starts are absent, so they are never offered as free space.

    Examples:
        >>> index = RowOccupancyIndex(floor=0, ceiling=5)
        >>> index.add(WidgetPlacement(id="a", type="fans", x=0, y=0, w=6, h=5))
        >>> index.occupancy(0)
        6
        >>> index.first_row_with_room(max_edge=6)
        0
    """

    def __init__(self, floor: int, ceiling: int) -> None:
        self.floor = max(0, floor)
        self.ceiling = ceiling
        self._edges: dict[int, int] = {}

    @classmethod
    def build(
        cls, widgets: Sequence[WidgetPlacement], lookback_rows: int
    ) -> RowOccupancyIndex:
        """Index the rows within ``lookback_rows`` of the layout's bottom edge."""
        ceiling = max_bottom(widgets)
        index = cls(floor=ceiling - lookback_rows, ceiling=ceiling)
        for widget in widgets:
            index.add(widget)
        return index

    def add(self, widget: WidgetPlacement | Placement) -> None:
        if not self.floor <= widget.y <= self.ceiling:
            return
        edge = widget.x + widget.w
        if edge > self._edges.get(widget.y, 0):
            self._edges[widget.y] = edge

    def occupancy(self, row: int) -> int:
        return self._edges.get(row, 0)

    def rows(self) -> list[int]:
        return sorted(self._edges)

    def first_row_with_room(self, max_edge: int) -> int | None:
        """Earliest indexed row whose occupancy is at most ``max_edge``."""
        for row in self.rows():
            if self._edges[row] <= max_edge:
                return row
        return None

    def __len__(self) -> int:
        return len(self._edges)


def compute_placement(
    existing: Sequence[WidgetPlacement],
    widget_type: str,
    default_size: GridSize,
    *,
    config: GridConfig | None = None,
) -> Placement:
    """
    Compute the rectangle for a new widget.

    Args:
        existing: Widgets already on the board
        widget_type: Registry key of the widget being added
        default_size: Registry default size; only its height is used
        config: Grid configuration (defaults to the 12-column grid)

    Returns:
        Placement with non-negative integer coordinates

    Examples:
        >>> compute_placement([], "fans", GridSize(w=6, h=5))
        Placement(x=0, y=0, w=6, h=5)

        >>> compute_placement([], "concerts", GridSize(w=12, h=3)).w
        12
    """
    config = config or GridConfig()
    height = max(1, default_size.h)
    bottom = max_bottom(existing)

    if config.is_full_width(widget_type):
        logger.debug("Full-width %s appended at row %d", widget_type, bottom)
        return Placement(x=0, y=bottom, w=config.columns, h=height)

    width = config.regular_width
    index = RowOccupancyIndex.build(existing, config.lookback_rows)
    row = index.first_row_with_room(max_edge=config.columns - width)

    if row is None:
        logger.debug("No room in rows %d-%d, new row at %d", index.floor, bottom, bottom)
        return Placement(x=0, y=bottom, w=width, h=height)

    logger.debug("Packing %s into row %d at column %d", widget_type, row, index.occupancy(row))
    return Placement(x=index.occupancy(row), y=row, w=width, h=height)


def find_overlaps(layout: Sequence[WidgetPlacement]) -> list[tuple[str, str]]:
    """
    Report pairs of widget ids whose rectangles intersect.

    Auto-placement avoids overlap heuristically; manual repositioning can
    still produce it. Overlaps are reported, never rejected.
    """
    pairs: list[tuple[str, str]] = []
    for i, first in enumerate(layout):
        for second in layout[i + 1 :]:
            if first.overlaps(second):
                pairs.append((first.id, second.id))
    return pairs


__all__ = ["RowOccupancyIndex", "compute_placement", "find_overlaps", "max_bottom"]

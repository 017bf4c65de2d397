"""
Breakpoint resolution.

Maps a viewport width to a breakpoint and derives how the canonical
``lg`` layout is drawn at that breakpoint. Derivation is a pure render-time
transform: stored coordinates are never touched, and recomputing on every
resize costs no persistence write.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from loopdash.core.config import BreakpointConfig
from loopdash.layout_engine.types import (
    GRID_COLUMNS,
    Breakpoint,
    ResponsiveCell,
    WidgetPlacement,
)

logger = logging.getLogger(__name__)

# Cells at or below these spans get compact styling
COMPACT_MAX_SPAN = 2
COMPACT_MAX_HEIGHT = 4


def classify(viewport_width: float, *, config: BreakpointConfig | None = None) -> Breakpoint:
    """
    Classify a viewport width.

    Examples:
        >>> classify(767)
        <Breakpoint.SM: 'sm'>
        >>> classify(768)
        <Breakpoint.MD: 'md'>
        >>> classify(1024)
        <Breakpoint.LG: 'lg'>
    """
    if viewport_width < 0:
        raise ValueError(f"viewport width must be non-negative, got {viewport_width}")

    config = config or BreakpointConfig()
    if viewport_width < config.md_min_width:
        return Breakpoint.SM
    if viewport_width < config.lg_min_width:
        return Breakpoint.MD
    return Breakpoint.LG


def columns_for(breakpoint: Breakpoint | str, *, config: BreakpointConfig | None = None) -> int:
    """Active column count for a breakpoint."""
    config = config or BreakpointConfig()
    bp = Breakpoint(breakpoint)
    if bp is Breakpoint.SM:
        return config.sm_columns
    if bp is Breakpoint.MD:
        return config.md_columns
    return GRID_COLUMNS


def compute_responsive_span(original_w: int, target_cols: int) -> int:
    """
    Scale a stored width to the active column count.

    ``round(original_w / 12 * target_cols)`` with halves rounded up, clamped
    to ``[1, target_cols]``.

    Examples:
        >>> compute_responsive_span(6, 4)
        2
        >>> compute_responsive_span(12, 8)
        8
        >>> compute_responsive_span(1, 4)
        1
    """
    if target_cols < 1:
        raise ValueError(f"target_cols must be at least 1, got {target_cols}")

    # floor(a / b + 1/2) in integer arithmetic
    scaled = original_w * target_cols
    span = (2 * scaled + GRID_COLUMNS) // (2 * GRID_COLUMNS)
    return max(1, min(span, target_cols))


def is_compact(span: int, h: int) -> bool:
    return span <= COMPACT_MAX_SPAN and h <= COMPACT_MAX_HEIGHT


def derive_breakpoint_layout(
    canonical: Sequence[WidgetPlacement],
    breakpoint: Breakpoint | str,
    *,
    config: BreakpointConfig | None = None,
) -> list[ResponsiveCell]:
    """
    Derive the drawn layout for a breakpoint from the canonical layout.

    ``lg`` mirrors the stored coordinates. Narrower breakpoints reflow the
    widgets in reading order (row, then column), each at its responsive
    span, starting a new visual row whenever a widget does not fit or the
    canonical row changes.

    Args:
        canonical: The persisted ``lg`` layout
        breakpoint: Target breakpoint
        config: Breakpoint configuration

    Returns:
        Cells in reading order
    """
    bp = Breakpoint(breakpoint)
    cols = columns_for(bp, config=config)
    ordered = sorted(enumerate(canonical), key=lambda item: (item[1].y, item[1].x, item[0]))

    if bp is Breakpoint.LG:
        cells = []
        for _, widget in ordered:
            span = compute_responsive_span(widget.w, cols)
            cells.append(
                ResponsiveCell(
                    widget_id=widget.id,
                    type=widget.type,
                    x=min(widget.x, cols - 1),
                    y=widget.y,
                    span=span,
                    h=widget.h,
                    compact=is_compact(span, widget.h),
                )
            )
        return cells

    cells = []
    cursor_x = 0
    row_y = 0
    row_height = 0
    source_row: int | None = None

    for _, widget in ordered:
        span = compute_responsive_span(widget.w, cols)
        if cursor_x > 0 and (cursor_x + span > cols or widget.y != source_row):
            row_y += row_height
            cursor_x = 0
            row_height = 0

        cells.append(
            ResponsiveCell(
                widget_id=widget.id,
                type=widget.type,
                x=cursor_x,
                y=row_y,
                span=span,
                h=widget.h,
                compact=is_compact(span, widget.h),
            )
        )
        cursor_x += span
        row_height = max(row_height, widget.h)
        source_row = widget.y

    logger.debug("Derived %d cells for %s (%d columns)", len(cells), bp, cols)
    return cells


__all__ = [
    "classify",
    "columns_for",
    "compute_responsive_span",
    "derive_breakpoint_layout",
    "is_compact",
]

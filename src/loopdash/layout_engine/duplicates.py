"""
Duplicate resolution.

Keeps the first placement of each widget type, in list order, and drops
the rest regardless of their ids. Running it twice never changes anything
the second time.
"""

import logging
from collections.abc import Sequence

from loopdash.layout_engine.types import CleanupResult, WidgetPlacement

logger = logging.getLogger(__name__)


def cleanup_duplicates(layout: Sequence[WidgetPlacement]) -> CleanupResult:
    """
    Remove repeated widget types from a layout.

    Examples:
        >>> a = WidgetPlacement(id="fans-1", type="fans", w=6, h=5)
        >>> b = WidgetPlacement(id="fans-2", type="fans", x=6, w=6, h=5)
        >>> result = cleanup_duplicates([a, b])
        >>> [w.id for w in result.cleaned], result.changed
        (['fans-1'], True)
    """
    seen: set[str] = set()
    cleaned: list[WidgetPlacement] = []
    removed: list[WidgetPlacement] = []

    for widget in layout:
        if widget.type in seen:
            removed.append(widget)
            continue
        seen.add(widget.type)
        cleaned.append(widget)

    if removed:
        logger.info(
            "Removed %d duplicate widget(s): %s",
            len(removed),
            ", ".join(w.id for w in removed),
        )
    return CleanupResult(cleaned=cleaned, removed=removed)


def duplicate_types(layout: Sequence[WidgetPlacement]) -> set[str]:
    """Widget types appearing more than once."""
    seen: set[str] = set()
    repeated: set[str] = set()
    for widget in layout:
        if widget.type in seen:
            repeated.add(widget.type)
        seen.add(widget.type)
    return repeated


__all__ = ["cleanup_duplicates", "duplicate_types"]

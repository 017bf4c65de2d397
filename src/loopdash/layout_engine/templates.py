"""
Canonical default layouts per mode.

Each template is the ``lg`` arrangement a fresh or reset dashboard starts
from. Smaller breakpoints are derived from it at render time.
"""

from loopdash.core.modes import Mode, resolve_mode
from loopdash.layout_engine.types import WidgetPlacement


def _widget(
    widget_type: str, x: int, y: int, w: int, h: int, min_w: int, min_h: int
) -> WidgetPlacement:
    # Template widgets use their type as id; added widgets get minted ids
    return WidgetPlacement(
        id=widget_type, type=widget_type, x=x, y=y, w=w, h=h, min_w=min_w, min_h=min_h
    )


TEMPLATES: dict[Mode, tuple[WidgetPlacement, ...]] = {
    Mode.STANDARD: (
        _widget("health-monitor", 0, 0, 8, 6, 6, 4),
        _widget("trend-tracker", 8, 0, 4, 6, 3, 4),
        _widget("artist-map", 0, 6, 6, 5, 4, 4),
        _widget("ai-todo", 6, 6, 6, 5, 4, 4),
    ),
    Mode.MC_ASSIST: (
        _widget("mc-chat", 0, 0, 12, 5, 8, 4),
        _widget("fans", 0, 5, 6, 5, 4, 4),
        _widget("followers-activity", 6, 5, 6, 5, 4, 4),
    ),
    Mode.RECORDING: (
        _widget("generate-chords", 0, 0, 6, 4, 3, 3),
        _widget("stem-separation", 6, 0, 6, 4, 3, 3),
        _widget("mc-chat", 0, 4, 12, 5, 8, 4),
    ),
    Mode.TOURING: (
        _widget("concerts", 0, 0, 12, 3, 6, 3),
        _widget("global-map", 0, 3, 12, 6, 6, 4),
        _widget("fans", 0, 9, 6, 5, 4, 4),
        _widget("followers-activity", 6, 9, 6, 5, 4, 4),
    ),
    Mode.PROMOTION: (
        _widget("top-songs", 0, 0, 6, 8, 3, 2),
        _widget("social-media", 6, 0, 6, 8, 4, 6),
        _widget("growth-plan", 0, 8, 6, 6, 4, 4),
        _widget("score", 6, 8, 6, 6, 3, 4),
    ),
    Mode.INSPIRATION: (
        _widget("hero-section", 0, 0, 12, 6, 8, 4),
        _widget("trend-tracker", 0, 6, 6, 6, 3, 4),
        _widget("generate-chords", 6, 6, 6, 6, 3, 3),
    ),
    Mode.STRATEGY: (
        _widget("score", 0, 0, 6, 6, 3, 4),
        _widget("growth-plan", 6, 0, 6, 6, 4, 4),
        _widget("streaming-stats", 0, 6, 6, 8, 4, 6),
        _widget("health-monitor", 6, 6, 6, 8, 6, 4),
    ),
}


def template_for(mode: Mode | str | None) -> list[WidgetPlacement]:
    """Fresh copy of the canonical layout for a mode."""
    return list(TEMPLATES[resolve_mode(mode)])


def template_types(mode: Mode | str | None) -> set[str]:
    return {w.type for w in TEMPLATES[resolve_mode(mode)]}


__all__ = ["TEMPLATES", "template_for", "template_types"]

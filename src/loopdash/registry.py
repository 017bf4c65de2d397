"""
Widget registry.

Maps a widget type identifier to its default sizing and an optional
render factory. The layout engine only consumes the sizing metadata;
rendering belongs to the host application.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from loopdash.core.errors import UnknownWidgetError

logger = logging.getLogger(__name__)

RenderFactory = Callable[[], Any]


@dataclass(frozen=True)
class GridSize:
    w: int
    h: int


@dataclass(frozen=True)
class WidgetSpec:
    """Registry entry for one widget type.

    Attributes:
        type: Registry key, also used as the placement ``type``
        name: Display name shown in the widget selector
        default_size: Suggested span on the 12-column grid
        min_size: Floor recorded on new placements (informative only)
        icon: Selector icon
        description: One-line selector description
        renderer: Factory producing the widget's renderable, if any
    """

    type: str
    name: str
    default_size: GridSize
    min_size: GridSize
    icon: str = ""
    description: str = ""
    renderer: RenderFactory | None = None


class WidgetRegistry:
    """Lookup table from widget type to :class:`WidgetSpec`."""

    def __init__(self, specs: list[WidgetSpec] | None = None) -> None:
        self._specs: dict[str, WidgetSpec] = {}
        for spec in specs or []:
            self.register(spec)

    def register(self, spec: WidgetSpec) -> None:
        if spec.type in self._specs:
            logger.debug("Replacing registry entry for %s", spec.type)
        self._specs[spec.type] = spec

    def lookup(self, widget_type: str) -> WidgetSpec:
        """Return the spec for ``widget_type``.

        Raises:
            UnknownWidgetError: If the type is not registered
        """
        try:
            return self._specs[widget_type]
        except KeyError:
            raise UnknownWidgetError(widget_type) from None

    def get(self, widget_type: str) -> WidgetSpec | None:
        return self._specs.get(widget_type)

    def create_renderer(self, widget_type: str) -> Any | None:
        """Build the renderable for a type, or None when unknown or headless."""
        spec = self._specs.get(widget_type)
        if spec is None or spec.renderer is None:
            return None
        return spec.renderer()

    def types(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, widget_type: object) -> bool:
        return widget_type in self._specs

    def __iter__(self) -> Iterator[WidgetSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


def _spec(
    widget_type: str,
    name: str,
    default: tuple[int, int],
    minimum: tuple[int, int],
    icon: str,
    description: str,
) -> WidgetSpec:
    return WidgetSpec(
        type=widget_type,
        name=name,
        default_size=GridSize(*default),
        min_size=GridSize(*minimum),
        icon=icon,
        description=description,
    )


# Known dashboard widgets, in selector order
DEFAULT_WIDGETS: list[WidgetSpec] = [
    _spec("hero-section", "Hero Section", (12, 6), (8, 4), "🎵", "Main hero section with chat interface"),
    _spec("mc-chat", "MC Chat", (12, 5), (8, 4), "💬", "Interactive Music Concierge chat interface"),
    _spec("fans", "Fans", (6, 5), (4, 4), "👥", "Fan growth analytics"),
    _spec("followers-activity", "Followers Activity", (6, 5), (4, 4), "📊", "Platform-specific follower activity"),
    _spec("concerts", "Checklist", (12, 3), (6, 3), "📋", "Task checklist and calendar management"),
    _spec("score", "Strategy Review", (4, 6), (3, 4), "📄", "AI-powered campaign strategy analysis"),
    _spec("top-songs", "Social Media Tracker", (4, 3), (3, 2), "📱", "Track social media trends and collaboration opportunities"),
    _spec("global-map", "Global Map", (8, 6), (6, 4), "🌍", "Global fan distribution map"),
    _spec("health-monitor", "Health Monitor", (8, 6), (6, 4), "📊", "Track your performance metrics and growth"),
    _spec("trend-tracker", "Trend Tracker", (4, 6), (3, 4), "📈", "Stay updated with trending topics"),
    _spec("artist-map", "Fan Heatmap", (6, 5), (4, 4), "🗺️", "Visualize your global fan distribution"),
    _spec("ai-todo", "AI To-Do & Calendar", (6, 5), (4, 4), "📅", "Manage tasks and schedule with AI assistance"),
    _spec("streaming-stats", "Streaming Analytics", (6, 8), (4, 6), "📊", "Detailed streaming platform analytics"),
    _spec("social-media", "Social Media", (6, 8), (4, 6), "📱", "Social media performance tracking"),
    _spec("growth-plan", "Growth Plan", (6, 6), (4, 4), "🎯", "AI-powered growth recommendations"),
    _spec("platform-status", "Platform Status", (6, 4), (4, 3), "🔗", "Connected platform status monitoring"),
    _spec("generate-chords", "Chord Analysis", (4, 4), (3, 3), "🎹", "AI-powered chord transcription and analysis"),
    _spec("stem-separation", "Vocal & Instrumental Stems", (4, 4), (3, 3), "🎤", "Separate audio into vocal and instrumental stems"),
]


def default_registry() -> WidgetRegistry:
    """Registry pre-populated with the dashboard's built-in widgets."""
    return WidgetRegistry(list(DEFAULT_WIDGETS))


__all__ = [
    "DEFAULT_WIDGETS",
    "GridSize",
    "RenderFactory",
    "WidgetRegistry",
    "WidgetSpec",
    "default_registry",
]

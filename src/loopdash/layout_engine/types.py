"""
Layout engine types.

All models are frozen; every mutation of a layout produces a new list.
Persisted field names follow the dashboard's wire shape (``minW``/``minH``),
Python attributes use snake_case.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from loopdash.core.config import GRID_COLUMNS

ROW_HEIGHT_PX = 120
SCHEMA_VERSION = 1


class Breakpoint(StrEnum):
    """Named viewport-width classes."""

    SM = "sm"
    MD = "md"
    LG = "lg"


class WidgetPlacement(BaseModel):
    """
    One widget on the board.

    Attributes:
        id: Opaque unique identifier, assigned at creation and never reused
        type: Widget registry key
        x: Grid column (0-based)
        y: Grid row (0-based)
        w: Column span, at most the 12-column grid width
        h: Row span
        min_w: Minimum width recorded from the registry (informative)
        min_h: Minimum height recorded from the registry (informative)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    w: int = Field(ge=1, le=GRID_COLUMNS)
    h: int = Field(ge=1)
    min_w: int = Field(default=1, ge=1, alias="minW")
    min_h: int = Field(default=1, ge=1, alias="minH")

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def moved_to(self, x: int, y: int) -> WidgetPlacement:
        return self.model_copy(update={"x": x, "y": y})

    def resized(self, w: int, h: int) -> WidgetPlacement:
        return self.model_copy(update={"w": w, "h": h})

    def overlaps(self, other: WidgetPlacement) -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


class Placement(BaseModel):
    """Rectangle computed for a new widget."""

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)
    w: int = Field(ge=1)
    h: int = Field(ge=1)


class ResponsiveCell(BaseModel):
    """
    How a widget is drawn at a given breakpoint.

    Derived at render time from the canonical layout; never persisted.
    """

    model_config = ConfigDict(frozen=True)

    widget_id: str
    type: str
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    span: int = Field(ge=1)
    h: int = Field(ge=1)
    compact: bool = False

    @property
    def min_height_px(self) -> int:
        return self.h * ROW_HEIGHT_PX


class CleanupResult(BaseModel):
    """Outcome of a duplicate-resolution pass."""

    model_config = ConfigDict(frozen=True)

    cleaned: list[WidgetPlacement] = Field(default_factory=list)
    removed: list[WidgetPlacement] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.removed)


class LayoutRecord(BaseModel):
    """Persisted envelope around the canonical ``lg`` layout."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    widgets: list[WidgetPlacement] = Field(default_factory=list)


class MutationStatus(StrEnum):
    """What a layout store operation did."""

    ADDED = "added"
    REMOVED = "removed"
    REPLACED = "replaced"
    MOVED = "moved"
    RESET = "reset"
    CLEANED = "cleaned"
    UNCHANGED = "unchanged"
    DUPLICATE = "duplicate"  # Type already on the board; benign no-op
    NOT_FOUND = "not_found"  # Unknown widget type or id; nothing changed


class MutationResult(BaseModel):
    """
    Result of a layout store operation.

    Attributes:
        status: What happened
        layout: The session layout after the operation
        widget: Widget added, removed or moved, when applicable
        persisted: Whether the backing store accepted the write
        warning: Recoverable problem worth surfacing (e.g. persistence failure)
    """

    model_config = ConfigDict(frozen=True)

    status: MutationStatus
    layout: list[WidgetPlacement] = Field(default_factory=list)
    widget: WidgetPlacement | None = None
    persisted: bool = False
    warning: str | None = None

    @property
    def changed(self) -> bool:
        return self.status in (
            MutationStatus.ADDED,
            MutationStatus.REMOVED,
            MutationStatus.REPLACED,
            MutationStatus.MOVED,
            MutationStatus.RESET,
            MutationStatus.CLEANED,
        )


__all__ = [
    "Breakpoint",
    "CleanupResult",
    "GRID_COLUMNS",
    "LayoutRecord",
    "MutationResult",
    "MutationStatus",
    "Placement",
    "ROW_HEIGHT_PX",
    "ResponsiveCell",
    "SCHEMA_VERSION",
    "WidgetPlacement",
]

"""
Layout store.

Owns the canonical, persisted ``lg`` arrangement for the session. Every
mutation replaces the whole layout in memory first and then writes it to
the key-value backend. A failed write never rolls back the in-memory
layout; it is reported on the result and logged as a warning.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence

from loopdash.core.config import DashboardConfig
from loopdash.core.errors import PersistenceError, UnknownWidgetError
from loopdash.core.modes import Mode, resolve_mode
from loopdash.layout_engine.duplicates import cleanup_duplicates
from loopdash.layout_engine.persistence import (
    KeyValueStore,
    decode_custom_layouts,
    decode_layout,
    encode_custom_layouts,
    encode_layout,
)
from loopdash.layout_engine.placement import compute_placement
from loopdash.layout_engine.templates import template_for
from loopdash.layout_engine.types import (
    GRID_COLUMNS,
    MutationResult,
    MutationStatus,
    WidgetPlacement,
)
from loopdash.registry import WidgetRegistry

logger = logging.getLogger(__name__)

IdFactory = Callable[[str], str]


def mint_widget_id(widget_type: str) -> str:
    return f"{widget_type}-{uuid.uuid4().hex[:12]}"


class LayoutStore:
    """Single-writer owner of the dashboard layout.

    Args:
        backend: Key-value store for durability
        registry: Widget registry used for default sizing
        config: Dashboard configuration (grid rules, storage keys)
        id_factory: Callable minting a fresh id for a widget type
    """

    def __init__(
        self,
        backend: KeyValueStore,
        registry: WidgetRegistry,
        *,
        config: DashboardConfig | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self.backend = backend
        self.registry = registry
        self.config = config or DashboardConfig()
        self._id_factory = id_factory or mint_widget_id
        self._layout: list[WidgetPlacement] | None = None
        self._loaded = False

    @property
    def layout_key(self) -> str:
        return self.config.storage.layout_key

    @property
    def custom_layouts_key(self) -> str:
        return self.config.storage.custom_layouts_key

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _load_persisted(self) -> list[WidgetPlacement] | None:
        try:
            raw = self.backend.get(self.layout_key)
            if raw is None:
                return None
            return decode_layout(raw, key=self.layout_key)
        except PersistenceError as exc:
            logger.warning("Ignoring unreadable persisted layout: %s", exc)
            return None

    def get_layout(self, mode: Mode | str | None = None) -> list[WidgetPlacement]:
        """
        Current layout for the session.

        Returns the session layout once one exists, otherwise the persisted
        layout, otherwise the default template for ``mode``.
        """
        if not self._loaded:
            self._layout = self._load_persisted()
            self._loaded = True
        if self._layout is not None:
            return list(self._layout)
        return self.default_layout(mode)

    def default_layout(self, mode: Mode | str | None = None) -> list[WidgetPlacement]:
        """Template for a mode: saved custom layout first, then the built-in one."""
        resolved = resolve_mode(mode)
        custom = self._read_custom_layouts().get(resolved)
        if custom is not None:
            return list(custom)
        return template_for(resolved)

    def available_widget_types(self, mode: Mode | str | None = None) -> list[str]:
        """Registry types not already on the board, in registry order."""
        present = {w.type for w in self.get_layout(mode)}
        return [t for t in self.registry.types() if t not in present]

    # ------------------------------------------------------------------
    # Mutate
    # ------------------------------------------------------------------

    def _commit(
        self,
        layout: Sequence[WidgetPlacement],
        status: MutationStatus,
        widget: WidgetPlacement | None = None,
    ) -> MutationResult:
        """Adopt ``layout`` as the session layout, then persist it."""
        self._layout = list(layout)
        self._loaded = True

        warning = None
        persisted = False
        try:
            self.backend.set(self.layout_key, encode_layout(self._layout))
            persisted = True
        except (PersistenceError, OSError, ValueError) as exc:
            warning = f"Layout kept in memory but not persisted: {exc}"
            logger.warning("Layout kept in memory but not persisted: %s", exc)

        return MutationResult(
            status=status,
            layout=list(self._layout),
            widget=widget,
            persisted=persisted,
            warning=warning,
        )

    def _unchanged(
        self,
        status: MutationStatus,
        layout: Sequence[WidgetPlacement],
        warning: str | None = None,
    ) -> MutationResult:
        return MutationResult(status=status, layout=list(layout), warning=warning)

    def set_layout(self, layout: Sequence[WidgetPlacement]) -> MutationResult:
        """Replace the whole layout and persist it."""
        logger.info("Replacing layout (%d widgets)", len(layout))
        return self._commit(layout, MutationStatus.REPLACED)

    def add_widget(self, widget_type: str, *, mode: Mode | str | None = None) -> MutationResult:
        """
        Add a widget of ``widget_type``.

        Returns NOT_FOUND when the registry does not know the type and
        DUPLICATE when a widget of that type is already on the board; in
        both cases nothing is added and nothing is written.
        """
        current = cleanup_duplicates(self.get_layout(mode)).cleaned

        try:
            spec = self.registry.lookup(widget_type)
        except UnknownWidgetError as exc:
            logger.warning("Not adding widget: %s", exc)
            return self._unchanged(MutationStatus.NOT_FOUND, current, warning=str(exc))

        if any(w.type == widget_type for w in current):
            logger.info("Widget type %s already on the board", widget_type)
            return self._unchanged(MutationStatus.DUPLICATE, current)

        placement = compute_placement(
            current, widget_type, spec.default_size, config=self.config.grid
        )
        widget = WidgetPlacement(
            id=self._fresh_id(widget_type, current),
            type=widget_type,
            x=placement.x,
            y=placement.y,
            w=placement.w,
            h=placement.h,
            min_w=spec.min_size.w,
            min_h=spec.min_size.h,
        )
        logger.info("Added %s at (%d, %d) %dx%d", widget.id, widget.x, widget.y, widget.w, widget.h)
        return self._commit([*current, widget], MutationStatus.ADDED, widget)

    def remove_widget(self, widget_id: str, *, mode: Mode | str | None = None) -> MutationResult:
        """Remove the widget with ``widget_id``; NOT_FOUND if absent."""
        current = self.get_layout(mode)
        target = next((w for w in current if w.id == widget_id), None)
        if target is None:
            return self._unchanged(
                MutationStatus.NOT_FOUND, current, warning=f"No widget with id {widget_id!r}"
            )

        logger.info("Removed %s", widget_id)
        return self._commit(
            [w for w in current if w.id != widget_id], MutationStatus.REMOVED, target
        )

    def move_widget(
        self, widget_id: str, x: int, y: int, *, mode: Mode | str | None = None
    ) -> MutationResult:
        """Reposition a widget. Coordinates are clamped onto the grid; overlap is allowed."""
        return self._reshape(widget_id, mode, x=x, y=y)

    def resize_widget(
        self, widget_id: str, w: int, h: int, *, mode: Mode | str | None = None
    ) -> MutationResult:
        """Resize a widget, clamped to ``1 <= w <= 12`` and ``h >= 1``."""
        return self._reshape(widget_id, mode, w=w, h=h)

    def _reshape(self, widget_id: str, mode: Mode | str | None, **changes: int) -> MutationResult:
        current = self.get_layout(mode)
        index = next((i for i, w in enumerate(current) if w.id == widget_id), None)
        if index is None:
            return self._unchanged(
                MutationStatus.NOT_FOUND, current, warning=f"No widget with id {widget_id!r}"
            )

        widget = current[index]
        w = min(GRID_COLUMNS, max(1, changes.get("w", widget.w)))
        h = max(1, changes.get("h", widget.h))
        x = min(GRID_COLUMNS - w, max(0, changes.get("x", widget.x)))
        y = max(0, changes.get("y", widget.y))
        updated = widget.resized(w, h).moved_to(x, y)
        if updated == widget:
            return self._unchanged(MutationStatus.UNCHANGED, current)

        layout = list(current)
        layout[index] = updated
        return self._commit(layout, MutationStatus.MOVED, updated)

    def reset_layout(self, mode: Mode | str | None = None) -> MutationResult:
        """Replace the layout with the built-in canonical template for ``mode``."""
        resolved = resolve_mode(mode)
        logger.info("Resetting layout to %s template", resolved)
        return self._commit(template_for(resolved), MutationStatus.RESET)

    def cleanup(self, mode: Mode | str | None = None) -> MutationResult:
        """Drop duplicate widget types; writes only when something changed."""
        result = cleanup_duplicates(self.get_layout(mode))
        if not result.changed:
            return self._unchanged(MutationStatus.UNCHANGED, result.cleaned)
        return self._commit(result.cleaned, MutationStatus.CLEANED)

    def _fresh_id(self, widget_type: str, layout: Sequence[WidgetPlacement]) -> str:
        taken = {w.id for w in layout}
        widget_id = self._id_factory(widget_type)
        while widget_id in taken:
            widget_id = mint_widget_id(widget_type)
        return widget_id

    # ------------------------------------------------------------------
    # Custom per-mode layouts
    # ------------------------------------------------------------------

    def _read_custom_layouts(self) -> dict[Mode, list[WidgetPlacement]]:
        try:
            raw = self.backend.get(self.custom_layouts_key)
            if raw is None:
                return {}
            return decode_custom_layouts(raw, key=self.custom_layouts_key)
        except PersistenceError as exc:
            logger.warning("Ignoring unreadable custom layouts: %s", exc)
            return {}

    def _write_custom_layouts(self, layouts: dict[Mode, list[WidgetPlacement]]) -> bool:
        try:
            if layouts:
                self.backend.set(self.custom_layouts_key, encode_custom_layouts(layouts))
            else:
                self.backend.delete(self.custom_layouts_key)
        except PersistenceError as exc:
            logger.warning("Custom layouts not persisted: %s", exc)
            return False
        return True

    def custom_modes(self) -> list[Mode]:
        return sorted(self._read_custom_layouts())

    def save_custom_layout(
        self, mode: Mode | str | None, layout: Sequence[WidgetPlacement] | None = None
    ) -> bool:
        """Store ``layout`` (default: the session layout) as the template for ``mode``."""
        resolved = resolve_mode(mode)
        widgets = list(layout) if layout is not None else self.get_layout(resolved)
        layouts = self._read_custom_layouts()
        layouts[resolved] = cleanup_duplicates(widgets).cleaned
        return self._write_custom_layouts(layouts)

    def clear_custom_layout(self, mode: Mode | str | None) -> bool:
        """Forget the custom template for one mode. Returns False if none was saved."""
        resolved = resolve_mode(mode)
        layouts = self._read_custom_layouts()
        if layouts.pop(resolved, None) is None:
            return False
        return self._write_custom_layouts(layouts)

    def clear_all_custom_layouts(self) -> bool:
        return self._write_custom_layouts({})


__all__ = ["IdFactory", "LayoutStore", "mint_widget_id"]

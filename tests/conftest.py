"""Shared pytest fixtures for Loopdash tests."""

from collections.abc import Callable
from itertools import count

import pytest

from loopdash.layout_engine import InMemoryKeyValueStore, LayoutStore, WidgetPlacement
from loopdash.registry import WidgetRegistry, default_registry


def make_widget(
    widget_type: str,
    x: int = 0,
    y: int = 0,
    w: int = 6,
    h: int = 5,
    widget_id: str | None = None,
) -> WidgetPlacement:
    """Build a placement with sensible defaults."""
    return WidgetPlacement(
        id=widget_id or f"{widget_type}-{x}-{y}",
        type=widget_type,
        x=x,
        y=y,
        w=w,
        h=h,
        min_w=4,
        min_h=4,
    )


@pytest.fixture
def widget() -> Callable[..., WidgetPlacement]:
    """Factory fixture for placements."""
    return make_widget


@pytest.fixture
def registry() -> WidgetRegistry:
    return default_registry()


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def sequential_ids() -> Callable[[str], str]:
    """Deterministic id factory: fans-1, fans-2, ..."""
    counter = count(1)
    return lambda widget_type: f"{widget_type}-{next(counter)}"


@pytest.fixture
def store(
    backend: InMemoryKeyValueStore,
    registry: WidgetRegistry,
    sequential_ids: Callable[[str], str],
) -> LayoutStore:
    return LayoutStore(backend, registry, id_factory=sequential_ids)


@pytest.fixture
def empty_store(store: LayoutStore) -> LayoutStore:
    """Store whose session layout starts empty instead of a mode template."""
    store.set_layout([])
    return store

"""Tests for the layout store."""

import json

import pytest

from loopdash.core.errors import PersistenceError
from loopdash.core.modes import Mode
from loopdash.layout_engine import (
    InMemoryKeyValueStore,
    LayoutStore,
    MutationStatus,
    WidgetPlacement,
    decode_layout,
    template_for,
)
from loopdash.layout_engine.store import mint_widget_id
from tests.conftest import make_widget


class FailingKeyValueStore(InMemoryKeyValueStore):
    """Backend whose writes always fail, as when storage quota is exhausted."""

    def set(self, key: str, value: str) -> None:
        raise PersistenceError("quota exceeded")


def _rects(layout: list[WidgetPlacement]) -> list[tuple[str, int, int, int, int]]:
    return [(w.type, w.x, w.y, w.w, w.h) for w in layout]


# =============================================================================
# Reading
# =============================================================================


class TestGetLayout:
    def test_defaults_to_standard_template(self, store: LayoutStore):
        assert store.get_layout() == template_for(Mode.STANDARD)

    def test_uses_mode_template_when_nothing_saved(self, store: LayoutStore):
        assert store.get_layout("touring") == template_for(Mode.TOURING)

    def test_unknown_mode_falls_back_to_standard(self, store: LayoutStore):
        assert store.get_layout("backstage") == template_for(Mode.STANDARD)

    def test_loads_persisted_layout(self, backend: InMemoryKeyValueStore, registry):
        first = LayoutStore(backend, registry)
        first.set_layout([make_widget("fans")])

        second = LayoutStore(backend, registry)
        assert _rects(second.get_layout()) == [("fans", 0, 0, 6, 5)]

    def test_legacy_record_is_cleaned_on_load(self, backend: InMemoryKeyValueStore, registry):
        legacy = [
            {"id": "a", "type": "fans", "x": 0, "y": 0, "w": 6, "h": 5, "minW": 4, "minH": 4},
            {"id": "b", "type": "fans", "x": 6, "y": 0, "w": 6, "h": 5, "minW": 4, "minH": 4},
        ]
        backend.set("loop-dashboard-layout", json.dumps(legacy))

        layout = LayoutStore(backend, registry).get_layout()
        assert [w.id for w in layout] == ["a"]

    def test_unreadable_record_falls_back_to_template(
        self, backend: InMemoryKeyValueStore, registry
    ):
        backend.set("loop-dashboard-layout", "{not json")
        assert LayoutStore(backend, registry).get_layout() == template_for(Mode.STANDARD)

    def test_returns_copy(self, empty_store: LayoutStore):
        empty_store.get_layout().append(make_widget("fans"))
        assert empty_store.get_layout() == []


class TestAvailableWidgetTypes:
    def test_excludes_types_on_board(self, store: LayoutStore, registry):
        available = store.available_widget_types()
        assert "health-monitor" not in available
        assert "fans" in available
        assert len(available) == len(registry) - len(template_for(Mode.STANDARD))

    def test_keeps_registry_order(self, empty_store: LayoutStore, registry):
        assert empty_store.available_widget_types() == registry.types()


# =============================================================================
# Adding widgets
# =============================================================================


class TestAddWidget:
    def test_end_to_end_scenario(self, empty_store: LayoutStore):
        fans = empty_store.add_widget("fans")
        assert fans.status == MutationStatus.ADDED
        assert _rects([fans.widget]) == [("fans", 0, 0, 6, 5)]

        followers = empty_store.add_widget("followers-activity")
        assert _rects([followers.widget]) == [("followers-activity", 6, 0, 6, 5)]

        concerts = empty_store.add_widget("concerts")
        assert _rects([concerts.widget]) == [("concerts", 0, 5, 12, 3)]

        assert len(empty_store.get_layout()) == 3

    def test_records_registry_minimums(self, empty_store: LayoutStore):
        widget = empty_store.add_widget("score").widget
        assert widget is not None
        assert (widget.min_w, widget.min_h) == (3, 4)
        assert widget.w == 6  # regular widgets are forced to half width

    def test_fresh_ids(self, empty_store: LayoutStore):
        first = empty_store.add_widget("fans").widget
        second = empty_store.add_widget("score").widget
        assert first is not None and second is not None
        assert first.id != second.id

    def test_duplicate_type_rejected(self, empty_store: LayoutStore, backend):
        empty_store.add_widget("fans")
        stored = backend.get("loop-dashboard-layout")

        result = empty_store.add_widget("fans")

        assert result.status == MutationStatus.DUPLICATE
        assert result.widget is None
        assert [w.type for w in empty_store.get_layout()].count("fans") == 1
        assert backend.get("loop-dashboard-layout") == stored

    def test_unknown_type_not_found(self, empty_store: LayoutStore):
        result = empty_store.add_widget("karaoke")
        assert result.status == MutationStatus.NOT_FOUND
        assert "karaoke" in (result.warning or "")
        assert empty_store.get_layout() == []

    def test_adds_below_template(self, store: LayoutStore):
        result = store.add_widget("fans")
        assert _rects([result.widget]) == [("fans", 0, 11, 6, 5)]

        paired = store.add_widget("followers-activity")
        assert _rects([paired.widget]) == [("followers-activity", 6, 11, 6, 5)]

    def test_old_gap_not_refilled(self, empty_store: LayoutStore):
        empty_store.add_widget("fans")
        empty_store.add_widget("concerts")

        result = empty_store.add_widget("followers-activity")
        assert (result.widget.x, result.widget.y) == (0, 8)

    def test_cleans_duplicates_before_adding(self, empty_store: LayoutStore):
        empty_store.set_layout(
            [make_widget("fans", widget_id="a"), make_widget("fans", 6, 0, widget_id="b")]
        )
        result = empty_store.add_widget("score")
        assert [w.id for w in result.layout if w.type == "fans"] == ["a"]

    def test_id_collision_reminted(self, backend, registry):
        store = LayoutStore(backend, registry, id_factory=lambda t: "taken")
        store.set_layout([make_widget("fans", widget_id="taken")])

        widget = store.add_widget("score").widget
        assert widget is not None
        assert widget.id != "taken"
        assert widget.id.startswith("score-")

    def test_persists(self, empty_store: LayoutStore, backend):
        result = empty_store.add_widget("fans")
        assert result.persisted is True
        stored = decode_layout(backend.get("loop-dashboard-layout"))
        assert stored == result.layout


class TestPersistenceFailure:
    def test_layout_kept_in_memory(self, registry, caplog):
        store = LayoutStore(FailingKeyValueStore(), registry)

        with caplog.at_level("WARNING", logger="loopdash.layout_engine.store"):
            result = store.add_widget("fans", mode="recording")

        assert result.status == MutationStatus.ADDED
        assert result.persisted is False
        assert "quota exceeded" in (result.warning or "")
        assert any(w.type == "fans" for w in store.get_layout())
        assert "not persisted" in caplog.text

    def test_later_mutations_still_work(self, registry):
        store = LayoutStore(FailingKeyValueStore(), registry)
        store.set_layout([])
        store.add_widget("fans")
        store.add_widget("score")
        assert [w.type for w in store.get_layout()] == ["fans", "score"]


# =============================================================================
# Other mutations
# =============================================================================


class TestRemoveWidget:
    def test_removes_by_id(self, store: LayoutStore):
        result = store.remove_widget("trend-tracker")
        assert result.status == MutationStatus.REMOVED
        assert result.widget is not None and result.widget.id == "trend-tracker"
        assert "trend-tracker" not in [w.id for w in store.get_layout()]

    def test_unknown_id(self, store: LayoutStore):
        result = store.remove_widget("nope")
        assert result.status == MutationStatus.NOT_FOUND
        assert store.get_layout() == template_for(Mode.STANDARD)

    def test_type_available_again(self, store: LayoutStore):
        store.remove_widget("ai-todo")
        assert "ai-todo" in store.available_widget_types()


class TestMoveAndResize:
    def test_move(self, store: LayoutStore):
        result = store.move_widget("artist-map", 0, 20)
        assert result.status == MutationStatus.MOVED
        assert (result.widget.x, result.widget.y) == (0, 20)

    def test_move_clamped_onto_grid(self, store: LayoutStore):
        result = store.move_widget("artist-map", 11, -3)
        assert (result.widget.x, result.widget.y) == (6, 0)

    def test_move_may_overlap(self, store: LayoutStore):
        result = store.move_widget("ai-todo", 0, 0)
        assert result.status == MutationStatus.MOVED

    def test_same_position_unchanged(self, store: LayoutStore):
        result = store.move_widget("health-monitor", 0, 0)
        assert result.status == MutationStatus.UNCHANGED
        assert result.changed is False

    def test_resize_clamped(self, store: LayoutStore):
        result = store.resize_widget("health-monitor", 20, 0)
        assert (result.widget.w, result.widget.h) == (12, 1)

    def test_resize_unknown_id(self, store: LayoutStore):
        assert store.resize_widget("nope", 4, 4).status == MutationStatus.NOT_FOUND


class TestResetLayout:
    @pytest.mark.parametrize("mode", list(Mode))
    def test_matches_template(self, empty_store: LayoutStore, mode: Mode):
        empty_store.add_widget("fans")
        result = empty_store.reset_layout(mode)
        assert result.status == MutationStatus.RESET
        assert result.layout == template_for(mode)
        assert empty_store.get_layout() == template_for(mode)

    def test_ignores_custom_layout(self, store: LayoutStore):
        store.save_custom_layout("touring", [make_widget("fans")])
        assert store.reset_layout("touring").layout == template_for(Mode.TOURING)


class TestCleanup:
    def test_removes_duplicates(self, store: LayoutStore):
        store.set_layout([make_widget("fans", widget_id="a"), make_widget("fans", widget_id="b")])
        result = store.cleanup()
        assert result.status == MutationStatus.CLEANED
        assert [w.id for w in store.get_layout()] == ["a"]

    def test_clean_layout_unchanged(self, store: LayoutStore):
        assert store.cleanup().status == MutationStatus.UNCHANGED


# =============================================================================
# Custom layouts
# =============================================================================


class TestCustomLayouts:
    def test_save_current_layout(self, empty_store: LayoutStore):
        empty_store.add_widget("fans")
        assert empty_store.save_custom_layout("recording") is True
        assert empty_store.custom_modes() == [Mode.RECORDING]

    def test_custom_used_as_default(self, backend, registry):
        LayoutStore(backend, registry).save_custom_layout("touring", [make_widget("fans")])

        fresh = LayoutStore(backend, registry)
        assert _rects(fresh.get_layout("touring")) == [("fans", 0, 0, 6, 5)]

    def test_saved_layout_deduplicated(self, store: LayoutStore):
        store.save_custom_layout(
            "strategy",
            [make_widget("fans", widget_id="a"), make_widget("fans", 6, 0, widget_id="b")],
        )
        assert [w.id for w in store.default_layout("strategy")] == ["a"]

    def test_clear_one(self, store: LayoutStore):
        store.save_custom_layout("touring", [make_widget("fans")])
        assert store.clear_custom_layout("touring") is True
        assert store.clear_custom_layout("touring") is False
        assert store.default_layout("touring") == template_for(Mode.TOURING)

    def test_clear_all(self, store: LayoutStore, backend):
        store.save_custom_layout("touring", [make_widget("fans")])
        store.save_custom_layout("recording", [make_widget("score")])
        store.clear_all_custom_layouts()
        assert store.custom_modes() == []
        assert backend.get("loop-custom-layouts") is None


def test_mint_widget_id_prefix():
    assert mint_widget_id("fans").startswith("fans-")
    assert mint_widget_id("fans") != mint_widget_id("fans")

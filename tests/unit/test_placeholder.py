"""Tests for the add-widget placeholder slot."""

from loopdash.layout_engine import Placement, WidgetPlacement, find_placeholder_slot
from loopdash.layout_engine.placeholder import fallback_slot


def _w(widget_type: str, x: int, y: int, w: int = 6, h: int = 5) -> WidgetPlacement:
    return WidgetPlacement(id=widget_type, type=widget_type, x=x, y=y, w=w, h=h)


class TestFindPlaceholderSlot:
    def test_empty_board(self):
        assert find_placeholder_slot([]) == Placement(x=0, y=0, w=6, h=4)

    def test_beside_lone_widget(self):
        slot = find_placeholder_slot([_w("fans", 0, 0)])
        assert slot == Placement(x=6, y=0, w=6, h=4)

    def test_narrow_widget_leaves_wider_slot(self):
        slot = find_placeholder_slot([_w("score", 0, 0, w=4)])
        assert slot == Placement(x=4, y=0, w=8, h=4)

    def test_full_row_has_no_slot(self):
        assert find_placeholder_slot([_w("a", 0, 0), _w("b", 6, 0)]) is None

    def test_full_width_type_rows_skipped(self):
        # ai-todo is full-width even at w=6
        assert find_placeholder_slot([_w("ai-todo", 0, 0)]) is None

    def test_wide_regular_widget_counts_as_full_width(self):
        assert find_placeholder_slot([_w("hero", 0, 0, w=10)]) is None

    def test_first_half_empty_row_wins(self):
        layout = [_w("a", 0, 0), _w("b", 6, 0), _w("c", 0, 5)]
        slot = find_placeholder_slot(layout)
        assert slot is not None
        assert (slot.x, slot.y) == (6, 5)

    def test_topmost_row_wins_regardless_of_list_order(self):
        # "low" is listed first but sits below the half-empty row of "high"
        layout = [_w("low", 0, 10), _w("high", 0, 0)]
        slot = find_placeholder_slot(layout)
        assert slot is not None
        assert (slot.x, slot.y) == (6, 0)

    def test_rows_covered_by_tall_widget_count(self):
        # "tall" spans rows 0-9 on the left; "b" fills rows 0-4 on the right
        layout = [_w("tall", 0, 0, h=10), _w("b", 6, 0)]
        slot = find_placeholder_slot(layout)
        assert slot is not None
        assert (slot.x, slot.y) == (6, 5)


class TestFallbackSlot:
    def test_bottom_of_board(self):
        assert fallback_slot([_w("a", 0, 0), _w("b", 6, 0)]) == Placement(x=0, y=5, w=6, h=4)

"""
Tests for table placement and viewport fitting.
"""

import pytest

from schemaviz.config import LayoutConfig
from schemaviz.layout import LayoutEngine, fit_canvas_to_tables
from schemaviz.models import CanvasState, ForeignKeyRef, Position, Table


def boxes_overlap(a, b, width, height, pad=0.0):
    half = pad / 2
    return (
        a.x - half < b.x + width + half
        and a.x + width + half > b.x - half
        and a.y - half < b.y + height + half
        and a.y + height + half > b.y - half
    )


class TestLayoutEngine:
    """Tests for LayoutEngine placement."""

    @pytest.fixture
    def engine(self):
        return LayoutEngine()

    @pytest.fixture
    def anchor_table(self):
        return Table(name="authors", position=Position(150, 150))

    def test_first_table_at_anchor(self, engine):
        """Test the first table always lands on the anchor."""
        assert engine.place("anything", [], 0, []) == Position(150, 150)
        assert engine.place("books", [ForeignKeyRef("authors", "id")], 0, []) == Position(150, 150)

    def test_related_table_does_not_overlap(self, engine, anchor_table):
        """Test a table referencing the first lands clear of its padded box."""
        position = engine.place("books", [ForeignKeyRef("authors", "id")], 1, [anchor_table])

        assert not boxes_overlap(position, anchor_table.position, 320, 280, pad=350 * 0.7)

    def test_related_table_placed_below(self, engine, anchor_table):
        """Test the nearest free axis-aligned ring slot is chosen."""
        position = engine.place("books", [ForeignKeyRef("authors", "id")], 1, [anchor_table])

        assert position.x == pytest.approx(150)
        assert position.y == pytest.approx(710)

    def test_unrelated_table_uses_spiral(self, engine, anchor_table):
        position = engine.place("misc", [], 1, [anchor_table])

        assert position == engine.find_spiral_position(1, [anchor_table])
        assert not engine.is_position_occupied(position.x, position.y, [anchor_table], 350 * 0.8)

    def test_placement_is_deterministic(self, engine, anchor_table):
        refs = [ForeignKeyRef("authors", "id")]
        assert engine.place("books", refs, 1, [anchor_table]) == engine.place("books", refs, 1, [anchor_table])

    def test_find_best_position_near_empty_canvas(self, engine):
        """Test that the 0 degree slot wins when every direction is free."""
        position = engine.find_best_position_near(1000, 1000, [])

        assert position.x == pytest.approx(1280)
        assert position.y == pytest.approx(1000)

    def test_grid_fallback(self):
        """Test the grid is used once the spiral finds no free slot."""
        engine = LayoutEngine(LayoutConfig(table_width=100000, table_height=100000))
        placed = [Table(name="huge", position=Position(0, 0))]

        position = engine.find_spiral_position(1, placed)

        # two columns for two tables, spacing 1.2 * 350
        assert position.x == pytest.approx(570)
        assert position.y == pytest.approx(150)

    def test_is_position_occupied(self, engine, anchor_table):
        """Test strict overlap with margin padding."""
        placed = [anchor_table]

        assert engine.is_position_occupied(150, 150, placed, 0)
        assert engine.is_position_occupied(469, 150, placed, 0)
        # touching edges is not an overlap
        assert not engine.is_position_occupied(470, 150, placed, 0)
        # a margin pads both boxes by half its size
        assert engine.is_position_occupied(470, 150, placed, 10)
        assert not engine.is_position_occupied(480, 150, placed, 10)

    def test_junction_offset_from_midpoint(self):
        """Test a link table is placed off the midpoint when its related slot is taken."""
        engine = LayoutEngine(LayoutConfig(table_width=200, table_height=200, min_spacing=100))
        placed = [
            Table(name="a", position=Position(0, 0)),
            Table(name="b", position=Position(200, 0)),
        ]
        refs = [ForeignKeyRef("a", "id"), ForeignKeyRef("b", "id")]

        assert engine.find_best_position_near(100, 0, placed) is None

        position = engine.place("a_b", refs, 2, placed)

        # perpendicular to a-b, pushed out to the first free ring
        assert position.x == pytest.approx(100)
        assert position.y == pytest.approx(280)
        for table in placed:
            assert not boxes_overlap(position, table.position, 200, 200)

    def test_custom_geometry(self):
        engine = LayoutEngine(LayoutConfig(anchor_offset=0, min_spacing=100, table_width=50, table_height=50))
        assert engine.place("a", [], 0, []) == Position(0, 0)

    def test_many_unrelated_tables(self, engine):
        """Test sequential placement never overlaps."""
        placed = []
        for i in range(15):
            position = engine.place(f"t{i}", [], i, placed)
            for table in placed:
                assert not boxes_overlap(position, table.position, 320, 280)
            placed.append(Table(name=f"t{i}", position=position))


class TestFitCanvasToTables:
    """Tests for viewport fitting."""

    def test_no_tables(self):
        assert fit_canvas_to_tables([], 1200, 800) is None

    def test_single_table_desktop(self):
        """Test zoom is capped at 1 and content is centered."""
        tables = [Table(name="a", position=Position(0, 0))]
        state = fit_canvas_to_tables(tables, 1200, 800)

        # content 380 x 350, available 1200 x 700
        assert state.zoom == pytest.approx(1.0)
        assert state.pan_x == pytest.approx((1200 - 380) / 2 + 50)
        assert state.pan_y == pytest.approx((700 - 350) / 2 + 50)

    def test_zoom_out_for_wide_content(self):
        tables = [
            Table(name="a", position=Position(0, 0)),
            Table(name="b", position=Position(3000, 0)),
        ]
        state = fit_canvas_to_tables(tables, 1200, 800)

        assert state.zoom == pytest.approx(1200 / (3280 + 100))

    def test_min_zoom_clamp(self):
        tables = [
            Table(name="a", position=Position(0, 0)),
            Table(name="b", position=Position(100000, 0)),
        ]
        assert fit_canvas_to_tables(tables, 1200, 800).zoom == pytest.approx(0.1)
        assert fit_canvas_to_tables(tables, 1200, 800, mobile=True).zoom == pytest.approx(0.3)

    def test_mobile_allows_zoom_in(self):
        tables = [Table(name="a", position=Position(0, 0))]
        state = fit_canvas_to_tables(tables, 2000, 2000, mobile=True)
        assert state.zoom == pytest.approx(2.0)

    def test_sidebar_reduces_width_on_desktop_only(self):
        tables = [
            Table(name="a", position=Position(0, 0)),
            Table(name="b", position=Position(3000, 0)),
        ]
        with_sidebar = fit_canvas_to_tables(tables, 1200, 800, show_sidebar=True)
        mobile_sidebar = fit_canvas_to_tables(tables, 1200, 800, mobile=True, show_sidebar=True)

        assert with_sidebar.zoom == pytest.approx(800 / 3380)
        # mobile ignores the sidebar and pads by 20
        assert mobile_sidebar.zoom == pytest.approx(1200 / 3320)

    def test_keeps_selection(self):
        tables = [Table(name="a", position=Position(0, 0))]
        current = CanvasState(zoom=0.5, selected_table="a", dragged_table=None)

        state = fit_canvas_to_tables(tables, 1200, 800, current=current)

        assert state.selected_table == "a"
        assert state.zoom != 0.5

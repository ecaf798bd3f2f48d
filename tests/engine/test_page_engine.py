"""Tests for LayoutContext: cursor, pages and page breaks."""

import pytest

from formflow.backends.html_backend import HtmlBackend
from formflow.engine.geometry import Margins, Rect
from formflow.engine.page_engine import LayoutContext
from formflow.exceptions import LayoutError
from formflow.style import PageStyle, ResolvedStyle, Spacing


class TestInitialize:
    """Test suite for LayoutContext.initialize."""

    def test_single_page(self, ctx):
        assert ctx.page_count == 1
        assert ctx.page_number == 1
        assert ctx.cursor.x == 72
        assert ctx.cursor.y == 720

    def test_content_bounds(self, ctx):
        assert ctx.content_top == 720
        assert ctx.content_bottom == 72
        assert ctx.content_area == Rect(72, 72, 468, 648)

    def test_initial_page_count(self, html_backend, style):
        ctx = LayoutContext.initialize(html_backend, style, page_count=3)

        assert ctx.page_count == 3
        assert len(html_backend.pages) == 3
        assert ctx.page_number == 1

    def test_page_count_at_least_one(self, html_backend, style):
        assert LayoutContext.initialize(html_backend, style, page_count=0).page_count == 1

    def test_margins_without_content_area(self):
        style = ResolvedStyle(page=PageStyle(margins=Margins(top=400, bottom=400, left=72, right=72)))

        with pytest.raises(LayoutError):
            LayoutContext.initialize(HtmlBackend(), style)


class TestCursor:
    """Test suite for cursor movement and page breaks."""

    def test_move_cursor_down(self, ctx):
        ctx.move_cursor_down(100)

        assert ctx.cursor.y == 620
        assert ctx.remaining_space() == 548

    def test_fits(self, ctx):
        assert ctx.fits(648)
        assert not ctx.fits(648.5)

    def test_moving_past_bottom_breaks_page(self, ctx):
        ctx.move_cursor_down(700)

        assert ctx.page_count == 2
        assert ctx.page_number == 2
        assert ctx.cursor.y == ctx.content_top
        assert ctx.cursor.x == ctx.content_area.x

    def test_landing_on_bottom_does_not_break(self, ctx):
        ctx.move_cursor_down(648)

        assert ctx.page_count == 1
        assert ctx.cursor.y == ctx.content_bottom

    def test_next_page_reuses_existing_pages(self, html_backend, style):
        ctx = LayoutContext.initialize(html_backend, style, page_count=2)

        ctx.next_page()

        assert ctx.page_count == 2
        assert ctx.page is html_backend.pages[1]

    def test_ensure_page_only_moves_forward(self, ctx):
        ctx.ensure_page(3)
        assert ctx.page_number == 3

        ctx.ensure_page(1)
        assert ctx.page_number == 3


class TestAbsoluteBlock:
    """Test suite for the absolute() context manager."""

    def test_restores_cursor_and_page(self, ctx):
        ctx.move_cursor_down(50)

        with ctx.absolute(300, 100, page_index=2):
            assert ctx.cursor.x == 300
            assert ctx.cursor.y == 100
            assert ctx.page_number == 3
            assert ctx.in_absolute_block

        assert ctx.cursor.y == 670
        assert ctx.page_number == 1
        assert ctx.page_count == 3
        assert not ctx.in_absolute_block

    def test_no_page_break_inside(self, ctx):
        with ctx.absolute(72, 50):
            ctx.move_cursor_down(100)
            assert ctx.cursor.y == -50

        assert ctx.page_count == 1

    def test_no_flow_spacing_inside(self, ctx):
        with ctx.absolute(72, 400):
            assert ctx.flow_spacing("heading") == Spacing()

        assert ctx.flow_spacing("heading") == Spacing(16, 8)


class TestRegistry:
    """Test suite for recording elements and fields."""

    def test_record_uses_current_page(self, ctx):
        ctx.next_page()

        element = ctx.record("rule", Rect(72, 700, 468, 1))

        assert element.page == 2
        assert ctx.drawn[0] is element

    def test_record_explicit_page(self, ctx):
        element = ctx.record("paragraph", Rect(72, 700, 468, 18), "text", page_number=5)

        assert element.page == 5

    def test_register_field_counts_and_names(self, ctx):
        assert ctx.register_field("email") == "email"
        assert ctx.register_field("") == "field_1"
        assert ctx.register_field("") == "field_2"
        assert ctx.field_count == 3

    def test_duplicate_field_name_warns(self, ctx, caplog):
        ctx.register_field("dup")
        ctx.register_field("dup")

        assert ctx.field_count == 2
        assert ctx.field_names == {"dup"}
        assert "Duplicate field name 'dup'" in caplog.text

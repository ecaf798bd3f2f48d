"""Tests for page header, footer and title."""

from unittest.mock import Mock

import pytest

from formflow.backends.html_backend import HtmlBackend
from formflow.engine.decorations import FOOTER_BASELINE, HEADER_OFFSET, draw_footer, draw_header, draw_title
from formflow.engine.page_engine import LayoutContext


@pytest.fixture
def backend():
    return Mock(wraps=HtmlBackend())


def _context(backend, style, pages):
    return LayoutContext.initialize(backend, style, page_count=pages)


class TestHeader:
    """Test suite for draw_header."""

    def test_single_page_has_no_page_numbers(self, backend, style):
        ctx = _context(backend, style, 1)

        draw_header(ctx, "Report")

        calls = backend.draw_text.call_args_list
        assert [call.args[1] for call in calls] == ["Report"]
        assert calls[0].args[2] == 72
        assert calls[0].args[3] == 792 - HEADER_OFFSET

    def test_page_numbers_on_every_page(self, backend, style):
        ctx = _context(backend, style, 3)

        draw_header(ctx, "Report")

        texts = [call.args[1] for call in backend.draw_text.call_args_list]
        assert texts == [
            "Report", "Page 1 of 3",
            "Report", "Page 2 of 3",
            "Report", "Page 3 of 3",
        ]

    def test_page_number_right_aligned(self, backend, style):
        ctx = _context(backend, style, 2)

        draw_header(ctx, "Report")

        call = backend.draw_text.call_args_list[1]
        width = HtmlBackend().text_width("Page 1 of 2", "Helvetica", 10)
        assert call.args[2] + width == pytest.approx(612 - 72)

    def test_header_not_recorded(self, backend, style):
        ctx = _context(backend, style, 2)

        draw_header(ctx, "Report")

        assert len(ctx.drawn) == 0


class TestFooter:
    """Test suite for draw_footer."""

    def test_centered_on_every_page(self, backend, style):
        ctx = _context(backend, style, 2)

        draw_footer(ctx, "Version 1.0")

        calls = backend.draw_text.call_args_list
        assert len(calls) == 2
        width = HtmlBackend().text_width("Version 1.0", "Helvetica", 9)
        for call in calls:
            assert call.args[2] == pytest.approx((612 - width) / 2)
            assert call.args[3] == FOOTER_BASELINE


class TestTitle:
    """Test suite for draw_title."""

    def test_centered_title_recorded(self, backend, style):
        ctx = _context(backend, style, 1)

        draw_title(ctx, "Empty Form")

        title = ctx.drawn.of_type("title")[0]
        assert title.bounds.x == pytest.approx((612 - title.bounds.width) / 2)
        assert title.bounds.top == 720
        assert ctx.cursor.y == 720 - 20 - 8

    def test_left_aligned_title(self, backend, style):
        ctx = _context(backend, style, 1)

        draw_title(ctx, "Empty Form", centered=False, margin_bottom=0)

        assert ctx.drawn[0].bounds.x == 72
        assert ctx.cursor.y == 700

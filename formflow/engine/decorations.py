"""Page header, footer and title.

Header and footer are drawn after layout, once the final page count is
known, so every page gets them and "Page i of N" is always correct. Both
sit inside the page margins and are not recorded as drawn elements.
"""

from __future__ import annotations

from typing import Optional

from .geometry import Rect
from .page_engine import LayoutContext
from .text_metrics import baseline_for_top

HEADER_OFFSET = 30.0
FOOTER_BASELINE = 20.0


def draw_header(ctx: LayoutContext, text: str, page_numbers: bool = True) -> None:
    """Title at the left of every page and "Page i of N" at the right.

    Page numbers are only drawn for documents with more than one page.
    """
    style = ctx.style.header
    y = ctx.page_size.height - HEADER_OFFSET
    total = ctx.page_count
    for index, page in enumerate(ctx.pages):
        ctx.backend.draw_text(
            page, text, ctx.margins.left, y,
            font_family=style.font_family, font_size=style.font_size, color=style.color,
        )
        if page_numbers and total > 1:
            label = f"Page {index + 1} of {total}"
            width = ctx.backend.text_width(label, style.font_family, style.font_size)
            ctx.backend.draw_text(
                page, label, ctx.page_size.width - ctx.margins.right - width, y,
                font_family=style.font_family, font_size=style.font_size, color=style.color,
            )


def draw_footer(ctx: LayoutContext, text: str) -> None:
    """Centered footer line on every page."""
    style = ctx.style.footer
    width = ctx.backend.text_width(text, style.font_family, style.font_size)
    x = (ctx.page_size.width - width) / 2
    for page in ctx.pages:
        ctx.backend.draw_text(
            page, text, x, FOOTER_BASELINE,
            font_family=style.font_family, font_size=style.font_size, color=style.color,
        )


def draw_title(ctx: LayoutContext, title: str, centered: bool = True, margin_bottom: Optional[float] = None) -> None:
    """Draw the document title at the cursor using the level 1 heading style."""
    style = ctx.style.heading(1)
    font_size = style.font_size
    width = ctx.backend.text_width(title, style.font_family, font_size)
    x = (ctx.page_size.width - width) / 2 if centered else ctx.cursor.x
    top = ctx.cursor.y

    ctx.backend.draw_text(
        ctx.page, title, x, baseline_for_top(top, font_size),
        font_family=style.font_family, font_size=font_size, color=style.color,
    )
    ctx.record("title", Rect(x, top - font_size, width, font_size), title)
    if margin_bottom is None:
        margin_bottom = ctx.style.spacing_for("heading").bottom
    ctx.move_cursor_down(font_size + margin_bottom)

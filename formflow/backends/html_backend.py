"""
HTML backend
------------

Produces a single HTML document that imitates the paginated PDF: one
``<section class="page">`` per page with the page size converted to CSS
pixels, and every mark absolutely positioned inside it. Form fields become
native ``input``/``select``/``textarea`` controls, so the page can be filled
in a browser.

Coordinates arrive in PDF points with a bottom-left origin and are flipped
to CSS top offsets here; nothing else about the layout changes.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from html import escape
from typing import List, Optional, Sequence

from ..engine.geometry import points_to_px
from ..engine.text_metrics import ASCENT_RATIO, estimate_text_width
from ..models import FieldOption
from ..style import FieldStyle
from .base import Backend, DocumentInfo

logger = logging.getLogger(__name__)

GENERIC_FAMILIES = {
    "Helvetica": "Helvetica, Arial, sans-serif",
    "Times": "'Times New Roman', Times, serif",
    "Courier": "'Courier New', Courier, monospace",
}


@dataclass(frozen=True)
class HtmlBackendConfig:
    """
    Options of the HTML backend.

    Attributes:
        title: Fallback for the ``<title>`` when the document has none.
        language: Value of the ``lang`` attribute of ``<html>``.
        page_gap: Vertical gap between pages in CSS pixels.
        scale: Extra zoom factor applied on top of the 96/72 conversion.
        embed_default_styles: Whether to emit the page stylesheet.
    """

    title: str = "Document"
    language: str = "en"
    page_gap: float = 24.0
    scale: float = 1.0
    embed_default_styles: bool = True


@dataclass(slots=True)
class HtmlPage:
    width: float
    height: float
    elements: List[str] = field(default_factory=list)


def css_font(font_family: str) -> str:
    """CSS font declarations for a PDF-style family name such as ``Helvetica-Bold``."""
    base, _, variant = font_family.replace("Bold", "-Bold").replace("--", "-").partition("-")
    if base == "TimesRoman":
        base = "Times"
    family = GENERIC_FAMILIES.get(base, f"'{escape(base)}', sans-serif")
    weight = "bold" if "Bold" in variant else "normal"
    slant = "italic" if ("Italic" in variant or "Oblique" in variant) else "normal"
    return f"font-family: {family}; font-weight: {weight}; font-style: {slant}"


class HtmlBackend(Backend):
    """Paginated, fillable HTML output."""

    name = "html"

    def __init__(self, config: Optional[HtmlBackendConfig] = None):
        self.config = config or HtmlBackendConfig()
        self.pages: List[HtmlPage] = []

    # ------------------------------------------------------------------
    # Unit conversion
    # ------------------------------------------------------------------
    def px(self, points: float) -> float:
        return points_to_px(points) * self.config.scale

    def _fmt(self, points: float) -> str:
        return f"{self.px(points):.2f}px"

    def _box(self, page: HtmlPage, x: float, y: float, width: float, height: float) -> str:
        top = page.height - (y + height)
        return (
            f"left: {self._fmt(x)}; top: {self._fmt(top)}; "
            f"width: {self._fmt(width)}; height: {self._fmt(height)}"
        )

    # ------------------------------------------------------------------
    # Backend protocol
    # ------------------------------------------------------------------
    def new_page(self, width: float, height: float) -> HtmlPage:
        page = HtmlPage(width=width, height=height)
        self.pages.append(page)
        return page

    def draw_text(self, page: HtmlPage, text: str, x: float, y: float, *,
                  font_family: str, font_size: float, color: str) -> None:
        top = page.height - (y + font_size * ASCENT_RATIO)
        page.elements.append(
            f'<span class="text" style="left: {self._fmt(x)}; top: {self._fmt(top)}; '
            f'font-size: {self._fmt(font_size)}; color: {escape(color)}; {css_font(font_family)}">'
            f"{escape(text)}</span>"
        )

    def draw_rectangle(self, page: HtmlPage, x: float, y: float, width: float, height: float, *,
                       fill_color: Optional[str] = None, border_color: Optional[str] = None,
                       border_width: float = 0.0) -> None:
        if fill_color is None and (border_color is None or border_width <= 0):
            return
        css = [self._box(page, x, y, width, height)]
        if fill_color is not None:
            css.append(f"background: {escape(fill_color)}")
        if border_color is not None and border_width > 0:
            css.append(f"border: {self._fmt(border_width)} solid {escape(border_color)}")
        page.elements.append(f'<div class="box" style="{"; ".join(css)}"></div>')

    def draw_line(self, page: HtmlPage, x1: float, y1: float, x2: float, y2: float, *,
                  color: str, thickness: float) -> None:
        length = math.hypot(x2 - x1, y2 - y1)
        angle = -math.degrees(math.atan2(y2 - y1, x2 - x1))
        top = page.height - y1 - thickness / 2
        style = (
            f"left: {self._fmt(x1)}; top: {self._fmt(top)}; width: {self._fmt(length)}; "
            f"height: {self._fmt(thickness)}; background: {escape(color)}"
        )
        if angle:
            style += f"; transform: rotate({angle:.2f}deg)"
        page.elements.append(f'<div class="line" style="{style}"></div>')

    def _field_css(self, page: HtmlPage, x: float, y: float, width: float, height: float,
                   style: FieldStyle, font_size: Optional[float] = None,
                   border_color: Optional[str] = None, border_width: Optional[float] = None) -> str:
        border_width = style.border_width if border_width is None else border_width
        css = [
            self._box(page, x, y, width, height),
            f"border: {self._fmt(border_width)} solid {escape(border_color or style.border_color)}",
            f"background: {escape(style.background_color)}",
            f"color: {escape(style.text_color)}",
        ]
        if font_size:
            css.append(f"font-size: {self._fmt(font_size)}")
            css.append(css_font(style.font_family))
        return "; ".join(css)

    def add_text_field(self, page: HtmlPage, name: str, x: float, y: float, width: float, height: float, *,
                       style: FieldStyle, font_size: float, value: str = "", multiline: bool = False,
                       max_length: Optional[int] = None, read_only: bool = False,
                       border_color: Optional[str] = None, border_width: Optional[float] = None,
                       placeholder: Optional[str] = None) -> None:
        css = self._field_css(page, x, y, width, height, style, font_size, border_color, border_width)
        attributes = [f'name="{escape(name)}"', f'style="{css}"']
        if max_length is not None:
            attributes.append(f'maxlength="{int(max_length)}"')
        if read_only:
            attributes.append("readonly")
        if placeholder:
            attributes.append(f'placeholder="{escape(placeholder)}"')
        attrs = " ".join(attributes)
        if multiline:
            page.elements.append(f'<textarea class="field" {attrs}>{escape(value or "")}</textarea>')
        else:
            page.elements.append(
                f'<input class="field" type="text" {attrs} value="{escape(value or "")}" />'
            )

    def add_dropdown(self, page: HtmlPage, name: str, x: float, y: float, width: float, height: float, *,
                     style: FieldStyle, font_size: float, options: Sequence[FieldOption],
                     selected: Optional[FieldOption] = None, read_only: bool = False,
                     draw_border: bool = False) -> None:
        css = self._field_css(page, x, y, width, height, style, font_size)
        rendered = []
        for option in options:
            chosen = " selected" if selected is not None and option.value == selected.value else ""
            rendered.append(
                f'<option value="{escape(option.value)}"{chosen}>{escape(option.label)}</option>'
            )
        disabled = " disabled" if read_only else ""
        page.elements.append(
            f'<select class="field" name="{escape(name)}" style="{css}"{disabled}>'
            f'{"".join(rendered)}</select>'
        )

    def add_checkbox(self, page: HtmlPage, name: str, x: float, y: float, size: float, *,
                     style: FieldStyle, checked: bool = False, read_only: bool = False) -> None:
        css = self._field_css(page, x, y, size, size, style)
        flags = (" checked" if checked else "") + (" disabled" if read_only else "")
        page.elements.append(
            f'<input class="field" type="checkbox" name="{escape(name)}" style="{css}"{flags} />'
        )

    def add_radio(self, page: HtmlPage, group: str, value: str, x: float, y: float, size: float, *,
                  style: FieldStyle, selected: bool = False, read_only: bool = False) -> None:
        css = self._field_css(page, x, y, size, size, style)
        flags = (" checked" if selected else "") + (" disabled" if read_only else "")
        page.elements.append(
            f'<input class="field" type="radio" name="{escape(group)}" value="{escape(value)}" '
            f'style="{css}"{flags} />'
        )

    def text_width(self, text: str, font_family: str, font_size: float) -> float:
        return estimate_text_width(text, font_size)

    def finalize(self, info: DocumentInfo) -> str:
        title = escape(info.title or self.config.title)
        head = [
            '<meta charset="utf-8" />',
            f"<title>{title}</title>",
        ]
        if info.author:
            head.append(f'<meta name="author" content="{escape(info.author)}" />')
        if info.version:
            head.append(f'<meta name="version" content="{escape(info.version)}" />')
        if self.config.embed_default_styles:
            head.extend(["<style>", self._default_stylesheet(), "</style>"])

        body = []
        for number, page in enumerate(self.pages, start=1):
            body.append(
                f'<section class="page" data-page="{number}" '
                f'style="width: {self._fmt(page.width)}; height: {self._fmt(page.height)}">'
            )
            body.extend(page.elements)
            body.append("</section>")
        logger.debug(f"HTML document with {len(self.pages)} page(s)")

        return "\n".join(
            [
                "<!DOCTYPE html>",
                f'<html lang="{escape(self.config.language)}">',
                "<head>",
                *head,
                "</head>",
                "<body>",
                '<form class="document">',
                *body,
                "</form>",
                "</body>",
                "</html>",
            ]
        )

    def _default_stylesheet(self) -> str:
        return "\n".join(
            [
                "html, body {",
                "  margin: 0;",
                "  padding: 0;",
                "  background: #f0f0f0;",
                "}",
                ".document {",
                "  display: flex;",
                "  flex-direction: column;",
                "  align-items: center;",
                f"  gap: {self.config.page_gap:.0f}px;",
                f"  padding: {self.config.page_gap:.0f}px 0;",
                "}",
                ".page {",
                "  position: relative;",
                "  overflow: hidden;",
                "  background: #ffffff;",
                "  box-shadow: 0 1px 4px rgba(0, 0, 0, 0.2);",
                "}",
                ".page > * {",
                "  position: absolute;",
                "  box-sizing: border-box;",
                "  margin: 0;",
                "}",
                ".text {",
                "  line-height: 1;",
                "  white-space: pre;",
                "}",
                ".line {",
                "  transform-origin: 0 50%;",
                "}",
                "textarea.field {",
                "  resize: none;",
                "}",
                "@media print {",
                "  body { background: none; }",
                "  .document { gap: 0; padding: 0; }",
                "  .page { box-shadow: none; page-break-after: always; }",
                "}",
            ]
        )

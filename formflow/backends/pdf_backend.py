"""PDF backend built on the reportlab canvas and its AcroForm support.

reportlab writes pages strictly in sequence, while the layout addresses
pages out of order (legacy fields, "Page i of N" headers). Each page handle
therefore keeps the drawing calls issued for it, validated when issued, and
:meth:`PdfBackend.finalize` replays them page by page into one canvas.
"""

from __future__ import annotations

import io
import logging
from collections import Counter
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

from reportlab.lib.colors import Color, HexColor
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..exceptions import RenderingError
from ..models import FieldOption
from ..style import FieldStyle
from .base import Backend, DocumentInfo

logger = logging.getLogger(__name__)

# Font family names of the form schema mapped to reportlab's names.
FONT_ALIASES = {
    "HelveticaBold": "Helvetica-Bold",
    "HelveticaOblique": "Helvetica-Oblique",
    "HelveticaBoldOblique": "Helvetica-BoldOblique",
    "CourierBold": "Courier-Bold",
    "CourierOblique": "Courier-Oblique",
    "CourierBoldOblique": "Courier-BoldOblique",
    "TimesRoman": "Times-Roman",
    "TimesRomanBold": "Times-Bold",
    "TimesRomanItalic": "Times-Italic",
    "TimesRomanBoldItalic": "Times-BoldItalic",
}


@dataclass(frozen=True)
class PdfBackendConfig:
    """
    Options of the PDF backend.

    Attributes:
        creator: Value of the document's Creator entry.
        subject: Optional Subject entry.
        compress: Whether page streams are compressed.
    """

    creator: str = "formflow"
    subject: Optional[str] = None
    compress: bool = True


@dataclass(slots=True)
class PdfPage:
    """Handle of one page: its size and the drawing calls issued for it."""

    width: float
    height: float
    ops: List[Callable[[canvas.Canvas], None]] = field(default_factory=list)


def resolve_font(font_family: str) -> str:
    """reportlab font name for ``font_family``.

    Raises:
        RenderingError: if the font is neither a standard PDF font nor
            registered with reportlab.
    """
    name = FONT_ALIASES.get(font_family, font_family)
    if name in pdfmetrics.standardFonts or name in pdfmetrics.getRegisteredFontNames():
        return name
    raise RenderingError("Unknown font family", repr(font_family))


def form_font(font_family: str) -> str:
    """Font for a form field widget; AcroForm only supports the standard fonts."""
    name = FONT_ALIASES.get(font_family, font_family)
    return name if name in pdfmetrics.standardFonts else "Helvetica"


def to_color(value: Optional[str]) -> Optional[Color]:
    if value is None:
        return None
    try:
        return HexColor(value)
    except (ValueError, TypeError) as exc:
        raise RenderingError("Invalid color", repr(value)) from exc


def _flags(*names: str) -> str:
    return " ".join(name for name in names if name)


class PdfBackend(Backend):
    """Fillable PDF output."""

    name = "pdf"

    def __init__(self, config: Optional[PdfBackendConfig] = None):
        self.config = config or PdfBackendConfig()
        self.pages: List[PdfPage] = []
        self._radio_buttons: Counter = Counter()

    def new_page(self, width: float, height: float) -> PdfPage:
        page = PdfPage(width=width, height=height)
        self.pages.append(page)
        return page

    def draw_text(self, page: PdfPage, text: str, x: float, y: float, *,
                  font_family: str, font_size: float, color: str) -> None:
        font = resolve_font(font_family)
        fill = to_color(color)

        def op(c: canvas.Canvas) -> None:
            c.setFillColor(fill)
            c.setFont(font, font_size)
            c.drawString(x, y, text)

        page.ops.append(op)

    def draw_rectangle(self, page: PdfPage, x: float, y: float, width: float, height: float, *,
                       fill_color: Optional[str] = None, border_color: Optional[str] = None,
                       border_width: float = 0.0) -> None:
        fill = to_color(fill_color)
        stroke = to_color(border_color) if border_width > 0 else None
        if fill is None and stroke is None:
            return

        def op(c: canvas.Canvas) -> None:
            if fill is not None:
                c.setFillColor(fill)
            if stroke is not None:
                c.setStrokeColor(stroke)
                c.setLineWidth(border_width)
            c.rect(x, y, width, height, stroke=int(stroke is not None), fill=int(fill is not None))

        page.ops.append(op)

    def draw_line(self, page: PdfPage, x1: float, y1: float, x2: float, y2: float, *,
                  color: str, thickness: float) -> None:
        stroke = to_color(color)

        def op(c: canvas.Canvas) -> None:
            c.setStrokeColor(stroke)
            c.setLineWidth(thickness)
            c.line(x1, y1, x2, y2)

        page.ops.append(op)

    def add_text_field(self, page: PdfPage, name: str, x: float, y: float, width: float, height: float, *,
                       style: FieldStyle, font_size: float, value: str = "", multiline: bool = False,
                       max_length: Optional[int] = None, read_only: bool = False,
                       border_color: Optional[str] = None, border_width: Optional[float] = None,
                       placeholder: Optional[str] = None) -> None:
        page.ops.append(partial(
            _textfield,
            name=name,
            value=value or "",
            x=x, y=y, width=width, height=height,
            borderWidth=style.border_width if border_width is None else border_width,
            borderColor=to_color(border_color or style.border_color),
            fillColor=to_color(style.background_color),
            textColor=to_color(style.text_color),
            fontName=form_font(style.font_family),
            fontSize=max(font_size, 1),
            fieldFlags=_flags("multiline" if multiline else "", "readOnly" if read_only else ""),
            maxlen=max_length,
            tooltip=placeholder,
        ))

    def add_dropdown(self, page: PdfPage, name: str, x: float, y: float, width: float, height: float, *,
                     style: FieldStyle, font_size: float, options: Sequence[FieldOption],
                     selected: Optional[FieldOption] = None, read_only: bool = False,
                     draw_border: bool = False) -> None:
        # A choice widget needs a value that is one of its options.
        choices = [(option.label, option.value) for option in options] or [(" ", " ")]
        value = selected.value if selected is not None else choices[0][1]
        page.ops.append(partial(
            _choice,
            name=name,
            value=value,
            options=choices,
            x=x, y=y, width=width, height=height,
            borderWidth=0 if draw_border else style.border_width,
            borderColor=to_color(style.border_color),
            fillColor=to_color(style.background_color),
            textColor=to_color(style.text_color),
            fontName=form_font(style.font_family),
            fontSize=max(font_size, 1),
            fieldFlags=_flags("combo", "readOnly" if read_only else ""),
        ))
        if draw_border:
            self.draw_rectangle(page, x, y, width, height,
                                border_color=style.border_color, border_width=style.border_width)

    def add_checkbox(self, page: PdfPage, name: str, x: float, y: float, size: float, *,
                     style: FieldStyle, checked: bool = False, read_only: bool = False) -> None:
        page.ops.append(partial(
            _checkbox,
            name=name,
            checked=checked,
            x=x, y=y, size=size,
            borderWidth=style.border_width,
            borderColor=to_color(style.border_color),
            fillColor=to_color(style.background_color),
            textColor=to_color(style.text_color),
            fieldFlags=_flags("readOnly" if read_only else ""),
        ))

    def add_radio(self, page: PdfPage, group: str, value: str, x: float, y: float, size: float, *,
                  style: FieldStyle, selected: bool = False, read_only: bool = False) -> None:
        self._radio_buttons[group] += 1
        page.ops.append(partial(
            self._radio,
            group=group,
            value=value,
            selected=selected,
            x=x, y=y, size=size,
            borderWidth=style.border_width,
            borderColor=to_color(style.border_color),
            fillColor=to_color(style.background_color),
            textColor=to_color(style.text_color),
            read_only=read_only,
        ))

    def text_width(self, text: str, font_family: str, font_size: float) -> float:
        return pdfmetrics.stringWidth(text, resolve_font(font_family), font_size)

    def finalize(self, info: DocumentInfo) -> bytes:
        if not self.pages:
            raise RenderingError("Cannot write a PDF without pages")
        buffer = io.BytesIO()
        first = self.pages[0]
        c = canvas.Canvas(
            buffer,
            pagesize=(first.width, first.height),
            pageCompression=int(self.config.compress),
        )
        c.setTitle(info.title)
        if info.author:
            c.setAuthor(info.author)
        if self.config.subject:
            c.setSubject(self.config.subject)
        c.setCreator(self.config.creator)

        for number, page in enumerate(self.pages, start=1):
            c.setPageSize((page.width, page.height))
            for op in page.ops:
                op(c)
            c.showPage()
            logger.debug(f"PDF page {number}: {len(page.ops)} drawing calls")
        c.save()
        return buffer.getvalue()

    def _radio(self, c: canvas.Canvas, *, group: str, value: str, selected: bool, read_only: bool,
               **widget: Any) -> None:
        # PDF radio groups need at least two buttons; a lone option becomes a checkbox.
        if self._radio_buttons[group] < 2:
            _checkbox(c, name=group, checked=selected,
                      fieldFlags=_flags("readOnly" if read_only else ""), **widget)
            return
        c.acroForm.radio(
            name=group,
            value=value,
            selected=selected,
            buttonStyle="circle",
            shape="circle",
            fieldFlags=_flags("noToggleToOff", "radio", "readOnly" if read_only else ""),
            forceBorder=True,
            **widget,
        )


def _textfield(c: canvas.Canvas, **kwargs: Any) -> None:
    c.acroForm.textfield(forceBorder=True, **kwargs)


def _choice(c: canvas.Canvas, **kwargs: Any) -> None:
    c.acroForm.choice(forceBorder=kwargs.get("borderWidth", 0) > 0, **kwargs)


def _checkbox(c: canvas.Canvas, **kwargs: Any) -> None:
    c.acroForm.checkbox(buttonStyle="check", forceBorder=True, **kwargs)

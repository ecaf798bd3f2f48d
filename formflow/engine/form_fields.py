"""Placement of legacy form fields at absolute page coordinates.

These fields bypass the flow cursor entirely: each one is drawn at the
literal position given in the document, on its page, with its label placed
around it according to the field type.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models import FormField, find_option
from .geometry import Rect
from .page_engine import LayoutContext

logger = logging.getLogger(__name__)

RADIO_SPACING = 24.0
LABEL_GAP = 8.0
SELECT_INDICATOR = "(select)"
SELECT_INDICATOR_WIDTH = 44.0
SIGNATURE_DATE_OFFSET = 20.0
SIGNATURE_DATE_WIDTH = 100.0


def resolve_page_index(ctx: LayoutContext, field: FormField) -> int:
    """0-based page index for ``field``, clamped to the existing pages."""
    last = ctx.page_count - 1
    if field.page < 1:
        logger.warning(f"Field {field.name!r} targets page {field.page}, placing it on page 1")
        return 0
    if field.page - 1 > last:
        logger.warning(
            f"Field {field.name!r} targets page {field.page} of {ctx.page_count}, placing it on the last page"
        )
        return last
    return field.page - 1


def place_form_fields(ctx: LayoutContext, fields: Sequence[FormField], draw_labels: bool = True) -> None:
    """Draw every legacy field.

    Args:
        ctx: Layout context after flow layout
        fields: Fields in document order
        draw_labels: Whether text and textarea fields get their label
            above them; flow content usually labels them already
    """
    for field in fields:
        page_index = resolve_page_index(ctx, field)
        with ctx.absolute(field.position.x, field.position.y, page_index):
            _place(ctx, field, draw_labels)


def _place(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    placers = {
        "text": _place_text,
        "textarea": _place_text,
        "checkbox": _place_checkbox,
        "radio": _place_radio,
        "dropdown": _place_dropdown,
        "signature": _place_signature,
    }
    placers[field.type](ctx, field, draw_labels)


def _draw_label(ctx: LayoutContext, text: str, x: float, y: float,
                font_size: Optional[float] = None, color: Optional[str] = None) -> None:
    label = ctx.style.label
    ctx.backend.draw_text(
        ctx.page, text, x, y,
        font_family=label.font_family,
        font_size=font_size or label.font_size,
        color=color or label.color,
    )


def _place_text(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    style = ctx.style.field_style(field.type)
    position = field.position
    width = position.width or style.width
    height = position.height or style.height
    multiline = field.multiline or field.type == "textarea"
    name = ctx.register_field(field.name)

    ctx.backend.add_text_field(
        ctx.page, name, position.x, position.y, width, height,
        style=style,
        font_size=field.font_size or style.font_size,
        value=field.default if isinstance(field.default, str) else "",
        multiline=multiline,
        max_length=field.max_length,
        read_only=field.read_only,
    )
    if draw_labels and field.label:
        _draw_label(ctx, field.display_label, position.x, position.y + height + ctx.style.label.margin_bottom)
    ctx.record("field", Rect(position.x, position.y, width, height), f"Field: {name} ({field.type})")


def _place_checkbox(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    style = ctx.style.field_style("checkbox")
    label = ctx.style.label
    position = field.position
    size = position.width or style.size
    name = ctx.register_field(field.name)

    ctx.backend.add_checkbox(
        ctx.page, name, position.x, position.y, size,
        style=style,
        checked=field.default is True,
        read_only=field.read_only,
    )
    if field.label:
        _draw_label(
            ctx,
            field.display_label,
            position.x + size + label.margin_bottom,
            position.y + size / 2 - label.font_size / 2,
        )
    ctx.record("field", Rect(position.x, position.y, size, size), f"Field: {name} (checkbox)")


def _place_radio(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    """Radio buttons stacked vertically below the anchor position."""
    style = ctx.style.field_style("radio")
    label = ctx.style.label
    position = field.position
    size = style.size
    name = ctx.register_field(field.name)
    selected = find_option(field.options, field.default)

    if field.label:
        _draw_label(ctx, field.display_label, position.x, position.y + size + 8)

    for index, option in enumerate(field.options):
        y = position.y - index * RADIO_SPACING
        ctx.backend.add_radio(
            ctx.page, name, option.value or option.label or str(index + 1), position.x, y, size,
            style=style,
            selected=selected is not None and option.value == selected.value,
            read_only=field.read_only,
        )
        _draw_label(ctx, option.label, position.x + size + 6, y + size / 2 - label.font_size / 2)

    count = max(len(field.options), 1)
    lowest = position.y - (count - 1) * RADIO_SPACING
    ctx.record(
        "field",
        Rect(position.x, lowest, size, position.y + size - lowest),
        f"Field: {name} (radio)",
    )


def _place_dropdown(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    """Dropdown with a "(select)" hint and its label left of the field by default."""
    style = ctx.style.field_style("dropdown")
    label = ctx.style.label
    position = field.position
    width = position.width or style.width
    height = position.height or style.height
    name = ctx.register_field(field.name)

    ctx.backend.add_dropdown(
        ctx.page, name, position.x, position.y, width, height,
        style=style,
        font_size=field.font_size or style.font_size,
        options=field.options,
        selected=find_option(field.options, field.default),
        read_only=field.read_only,
    )

    hint_size = max(8.0, min(10.0, label.font_size - 2))
    _draw_label(
        ctx, SELECT_INDICATOR, position.x + width + 4, position.y + (height - hint_size) / 2 + 2,
        font_size=hint_size, color="#808080",
    )

    label_position = field.label_position or "left"
    if field.label and label_position != "none":
        text = field.display_label
        centered_y = position.y + (height - label.font_size) / 2 + 2
        if label_position == "left":
            text_width = ctx.backend.text_width(text, label.font_family, label.font_size)
            _draw_label(ctx, text, position.x - text_width - LABEL_GAP, centered_y)
        elif label_position == "right":
            _draw_label(ctx, text, position.x + width + LABEL_GAP + SELECT_INDICATOR_WIDTH, centered_y)
        else:
            _draw_label(ctx, text, position.x, position.y + height + label.margin_bottom)

    ctx.record("field", Rect(position.x, position.y, width, height), f"Field: {name} (dropdown)")


def _place_signature(ctx: LayoutContext, field: FormField, draw_labels: bool) -> None:
    """Signature box with a signing line and a "Date:" line beside it."""
    style = ctx.style.field_style("signature")
    label = ctx.style.label
    position = field.position
    width = position.width or style.width
    height = position.height or style.height
    name = ctx.register_field(field.name)

    ctx.backend.add_text_field(
        ctx.page, name, position.x, position.y, width, height,
        style=style,
        font_size=field.font_size or style.font_size,
        read_only=field.read_only,
        border_color=style.required_border_color if field.required else style.border_color,
        border_width=style.required_border_width if field.required else style.border_width,
    )

    label_y = position.y + height + label.margin_bottom
    if field.label:
        _draw_label(ctx, field.display_label, position.x, label_y)
    ctx.backend.draw_line(
        ctx.page, position.x, position.y, position.x + width, position.y,
        color=style.border_color, thickness=1.0,
    )

    date_x = position.x + width + SIGNATURE_DATE_OFFSET
    _draw_label(ctx, "Date:", date_x, label_y)
    ctx.backend.draw_line(
        ctx.page, date_x, position.y, date_x + SIGNATURE_DATE_WIDTH, position.y,
        color=style.border_color, thickness=1.0,
    )
    ctx.record("field", Rect(position.x, position.y, width, height), f"Field: {name} (signature)")

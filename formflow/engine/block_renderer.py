"""Drawing of flow blocks through backend primitives.

Each ``draw_*`` function draws one block at the layout cursor, records its
:class:`~formflow.engine.layout_validator.DrawnElement` and advances the
cursor. Geometry comes from the same helpers the height estimator uses, so
the advance of a drawn block equals its estimate.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..exceptions import RenderingError
from ..models import (
    Admonition,
    ContentBlock,
    Field,
    FieldCell,
    Heading,
    LabelCell,
    Paragraph,
    Rule,
    Spacer,
    Table,
    find_option,
)
from .geometry import Rect
from .height_estimator import (
    ADMONITION_MIN_PADDING,
    ADMONITION_TITLE_GAP,
    FIELD_LABEL_GAP,
    admonition_metrics,
    field_box_height,
    field_label_height,
    paragraph_metrics,
    table_label_height,
)
from .page_engine import LayoutContext
from .table_expansion import expand_table
from .text_metrics import baseline_for_top

logger = logging.getLogger(__name__)

ADMONITION_PREFIXES = {
    "warning": "Warning",
    "note": "Note",
    "info": "Info",
    "tip": "Tip",
    "danger": "Danger",
}

EXCERPT_LENGTH = 50
CHECKBOX_MAX_SIZE = 16.0


def draw_block(ctx: LayoutContext, block: ContentBlock) -> None:
    """Draw ``block`` at the cursor of ``ctx``."""
    if isinstance(block, Heading):
        draw_heading(ctx, block)
    elif isinstance(block, Paragraph):
        draw_paragraph(ctx, block)
    elif isinstance(block, Admonition):
        draw_admonition(ctx, block)
    elif isinstance(block, Rule):
        draw_rule(ctx, block)
    elif isinstance(block, Spacer):
        draw_spacer(ctx, block)
    elif isinstance(block, Table):
        draw_table(ctx, block)
    elif isinstance(block, Field):
        draw_field(ctx, block)
    else:
        logger.warning(f"Unknown content block type {getattr(block, 'type_name', type(block).__name__)!r}, skipped")


def _block_x(ctx: LayoutContext, block: ContentBlock) -> float:
    if block.position is not None and block.position.x is not None:
        return block.position.x
    return ctx.content_area.x


def _excerpt(text: str) -> str:
    if len(text) > EXCERPT_LENGTH:
        return text[:EXCERPT_LENGTH] + "..."
    return text


def draw_heading(ctx: LayoutContext, block: Heading) -> None:
    spacing = ctx.flow_spacing("heading")
    style = ctx.style.heading(block.level)
    font_size = style.font_size

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    ctx.backend.draw_text(
        ctx.page,
        block.text,
        x,
        baseline_for_top(top, font_size),
        font_family=style.font_family,
        font_size=font_size,
        color=style.color,
    )
    width = ctx.backend.text_width(block.text, style.font_family, font_size)
    ctx.record("heading", Rect(x, top - font_size, width, font_size), block.text)
    ctx.move_cursor_down(font_size + spacing.bottom)


def draw_paragraph(ctx: LayoutContext, block: Paragraph) -> None:
    """Draw a paragraph line by line.

    A line that no longer fits starts a new page. One drawn element is
    recorded per page the paragraph occupies.
    """
    spacing = ctx.flow_spacing("paragraph")
    style = ctx.style.paragraph
    metrics = paragraph_metrics(block, ctx.style, ctx.content_area.width)

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    segment_top = ctx.cursor.y
    segment_page = ctx.page_number
    excerpt = _excerpt(block.text)

    for line in metrics.lines:
        if not ctx.in_absolute_block and ctx.cursor.y < ctx.content_bottom + metrics.line_height:
            _record_paragraph_segment(ctx, x, segment_top, metrics.width, segment_page, excerpt)
            ctx.next_page()
            segment_top = ctx.cursor.y
            segment_page = ctx.page_number
        ctx.backend.draw_text(
            ctx.page,
            line,
            x,
            baseline_for_top(ctx.cursor.y, metrics.font_size),
            font_family=style.font_family,
            font_size=metrics.font_size,
            color=style.color,
        )
        # Advance without the break check; the next line or the bottom
        # margin below resolves it.
        ctx.cursor.y -= metrics.line_height

    _record_paragraph_segment(ctx, x, segment_top, metrics.width, segment_page, excerpt)
    ctx.move_cursor_down(spacing.bottom)


def _record_paragraph_segment(ctx: LayoutContext, x: float, top: float, width: float,
                              page_number: int, excerpt: str) -> None:
    height = top - ctx.cursor.y
    ctx.record("paragraph", Rect(x, top - height, width, height), excerpt, page_number=page_number)


def draw_admonition(ctx: LayoutContext, block: Admonition) -> None:
    spacing = ctx.flow_spacing("admonition")
    box = ctx.style.admonition(block.variant)
    width = ctx.content_area.width
    metrics = admonition_metrics(block, ctx.style, width)

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    bottom = top - metrics.box_height
    page = ctx.page

    ctx.backend.draw_rectangle(page, x, bottom, width, metrics.box_height, fill_color=box.background_color)
    ctx.backend.draw_rectangle(page, x, bottom, box.border_width, metrics.box_height, fill_color=box.border_color)

    # Text sits 40% of the body size lower so it looks vertically centered
    # despite the descender space below the last baseline.
    visual_offset = box.content_font_size * 0.4
    text_x = x + box.border_width + box.padding
    title_y = top - ADMONITION_MIN_PADDING - visual_offset - box.title_font_size
    prefix = ADMONITION_PREFIXES.get(block.variant, "Note")
    ctx.backend.draw_text(
        page,
        f"{prefix}: {block.title}",
        text_x,
        title_y,
        font_family=box.title_font_family,
        font_size=box.title_font_size,
        color=box.text_color,
    )

    line_y = title_y - ADMONITION_TITLE_GAP
    for index, line in enumerate(metrics.lines):
        ctx.backend.draw_text(
            page,
            line,
            text_x,
            line_y,
            font_family=box.content_font_family,
            font_size=box.content_font_size,
            color=box.text_color,
        )
        if index < len(metrics.lines) - 1:
            line_y -= metrics.line_height

    ctx.record("admonition", Rect(x, bottom, width, metrics.box_height), block.title)
    ctx.move_cursor_down(metrics.box_height + spacing.bottom)


def draw_rule(ctx: LayoutContext, block: Rule) -> None:
    spacing = ctx.flow_spacing("rule")
    style = ctx.style.rule
    width = ctx.content_area.width

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    center = top - style.thickness / 2
    ctx.backend.draw_line(ctx.page, x, center, x + width, center, color=style.color, thickness=style.thickness)
    ctx.record("rule", Rect(x, top - style.thickness, width, style.thickness))
    ctx.move_cursor_down(style.thickness + spacing.bottom)


def draw_spacer(ctx: LayoutContext, block: Spacer) -> None:
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    ctx.record("spacer", Rect(x, top - block.height, ctx.content_area.width, block.height))
    ctx.move_cursor_down(block.height)


def draw_table(ctx: LayoutContext, block: Table) -> None:
    """Draw a table: optional label, header row, then the data rows."""
    table = expand_table(block)
    style = ctx.style.table
    spacing = ctx.flow_spacing("table")
    backend = ctx.backend
    row_height = table.row_height if table.row_height is not None else style.row_height
    header_height = table.header_height if table.header_height is not None else style.header_height
    total_width = table.total_width

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    page = ctx.page

    label_height = table_label_height(table, ctx.style)
    if table.label:
        label = ctx.style.label
        backend.draw_text(
            page,
            table.label,
            x,
            top - label_height + 2,
            font_family=label.font_family,
            font_size=label.font_size,
            color=label.color,
        )

    header_top = top - label_height
    header_bottom = header_top - header_height
    backend.draw_rectangle(page, x, header_bottom, total_width, header_height, fill_color=style.header_background)

    column_x = x
    for column in table.columns:
        text_width = backend.text_width(column.label, style.header_font_family, style.header_font_size)
        backend.draw_text(
            page,
            column.label,
            column_x + (column.width - text_width) / 2,
            header_bottom + (header_height - style.header_font_size) / 2 + 2,
            font_family=style.header_font_family,
            font_size=style.header_font_size,
            color=style.header_text_color,
        )
        if table.show_borders and column_x != x:
            _border(ctx, column_x, header_top, column_x, header_bottom)
        column_x += column.width

    if table.show_borders:
        _border(ctx, x, header_top, x + total_width, header_top)
        _border(ctx, x, header_bottom, x + total_width, header_bottom)
        _border(ctx, x, header_top, x, header_bottom)
        _border(ctx, x + total_width, header_top, x + total_width, header_bottom)

    row_top = header_bottom
    for row_index, row in enumerate(table.rows):
        row_bottom = row_top - row_height
        background = style.alternate_row_background if row_index % 2 == 1 else style.row_background
        backend.draw_rectangle(page, x, row_bottom, total_width, row_height, fill_color=background)

        column_x = x
        for cell, column in zip(row.cells, table.columns):
            if isinstance(cell, LabelCell):
                if cell.value:
                    backend.draw_text(
                        page,
                        cell.value,
                        column_x + style.cell_padding,
                        row_bottom + (row_height - style.cell_font_size) / 2 + 2,
                        font_family=style.cell_font_family,
                        font_size=style.cell_font_size,
                        color=style.cell_text_color,
                    )
            else:
                _draw_cell_field(
                    ctx,
                    cell,
                    column_x + style.cell_padding,
                    row_bottom + style.cell_padding,
                    column.width - style.cell_padding * 2,
                    row_height - style.cell_padding * 2,
                )
            if table.show_borders and column_x != x:
                _border(ctx, column_x, row_top, column_x, row_bottom)
            column_x += column.width

        if table.show_borders:
            _border(ctx, x, row_bottom, x + total_width, row_bottom)
            _border(ctx, x, row_top, x, row_bottom)
            _border(ctx, x + total_width, row_top, x + total_width, row_bottom)
        row_top = row_bottom

    height = label_height + header_height + len(table.rows) * row_height
    ctx.record("table", Rect(x, top - height, total_width, height), table.label)
    ctx.move_cursor_down(height + spacing.bottom)


def _border(ctx: LayoutContext, x1: float, y1: float, x2: float, y2: float) -> None:
    style = ctx.style.table
    ctx.backend.draw_line(ctx.page, x1, y1, x2, y2, color=style.border_color, thickness=style.border_width)


def _draw_cell_field(ctx: LayoutContext, cell: FieldCell, x: float, y: float, width: float, height: float) -> None:
    fields = ctx.style.fields
    name = ctx.register_field(cell.field_name)
    if cell.kind == "text":
        style = fields["text"]
        ctx.backend.add_text_field(
            ctx.page, name, x, y, width, height,
            style=style,
            font_size=min(style.font_size, height - 4),
            value=cell.default if isinstance(cell.default, str) else "",
        )
    elif cell.kind == "dropdown":
        style = fields["dropdown"]
        ctx.backend.add_dropdown(
            ctx.page, name, x, y, width, height,
            style=style,
            font_size=min(style.font_size, height - 4),
            options=cell.options,
            selected=find_option(cell.options, cell.default),
            draw_border=True,
        )
    elif cell.kind == "checkbox":
        style = fields["checkbox"]
        size = min(height - 2, style.size)
        ctx.backend.add_checkbox(
            ctx.page, name, x + (width - size) / 2, y + (height - size) / 2, size,
            style=style,
            checked=cell.default is True,
        )
    else:
        raise RenderingError("Unsupported table cell type", repr(cell.kind))


def draw_field(ctx: LayoutContext, block: Field) -> None:
    """Draw a labelled form field.

    The label sits above the field, or to its left when ``label_position``
    is ``"left"``, in which case it is vertically centered on the field.
    """
    spacing = ctx.flow_spacing("field")
    label = ctx.style.label
    box_height = field_box_height(block)
    label_text = f"{block.label} *" if block.required else block.label

    ctx.move_cursor_down(spacing.top)
    x = _block_x(ctx, block)
    top = ctx.cursor.y
    page = ctx.page

    if block.label_position == "left":
        field_x = x + block.label_width
        field_y = top - box_height
        field_width = block.width or (ctx.content_area.width - block.label_width)
        label_y = field_y + (box_height - label.font_size) / 2
        recorded_width = block.label_width + field_width
    else:
        field_x = x
        field_y = top - label.font_size - FIELD_LABEL_GAP - box_height
        field_width = block.width or ctx.content_area.width
        label_y = baseline_for_top(top, label.font_size)
        recorded_width = field_width
    total_height = field_label_height(block, ctx.style) + box_height

    if label_text:
        ctx.backend.draw_text(
            page, label_text, x, label_y,
            font_family=label.font_family,
            font_size=label.font_size,
            color=label.color,
        )

    _draw_field_widget(ctx, block, field_x, field_y, field_width, box_height)

    ctx.record(
        "field",
        Rect(x, top - total_height, recorded_width, total_height),
        f"Field: {block.field_name} ({block.field_type})",
    )
    ctx.move_cursor_down(total_height + spacing.bottom)


def _draw_field_widget(ctx: LayoutContext, block: Field, x: float, y: float, width: float, height: float) -> None:
    fields = ctx.style.fields
    name = ctx.register_field(block.field_name)
    default: Optional[str] = block.default if isinstance(block.default, str) else None

    if block.field_type in ("text", "textarea"):
        style = fields["text"]
        multiline = block.field_type == "textarea"
        font_size = min(style.font_size, 12.0) if multiline else min(style.font_size, height - 4)
        ctx.backend.add_text_field(
            ctx.page, name, x, y, width, height,
            style=style,
            font_size=font_size,
            value=default or "",
            multiline=multiline,
            placeholder=block.placeholder,
        )
    elif block.field_type == "dropdown":
        style = fields["dropdown"]
        ctx.backend.add_dropdown(
            ctx.page, name, x, y, width, height,
            style=style,
            font_size=min(style.font_size, height - 4),
            options=block.options,
            selected=find_option(block.options, default),
            draw_border=True,
        )
    elif block.field_type == "checkbox":
        style = fields["checkbox"]
        size = min(height, CHECKBOX_MAX_SIZE)
        ctx.backend.add_checkbox(
            ctx.page, name, x, y + (height - size) / 2, size,
            style=style,
            checked=block.default is True,
        )
    else:
        raise RenderingError("Unsupported field type", f"{block.field_name}: {block.field_type!r}")

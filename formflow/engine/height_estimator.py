"""Height estimation for flow blocks.

Every function here is pure. The returned height is the vertical advance of
the cursor for a block, margins included. The block renderer uses the same
helpers for its own geometry, so an estimate and the drawn block agree
exactly for everything except paragraphs split across a page break.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ..models import Admonition, ContentBlock, Field, Heading, Paragraph, Rule, Spacer, Table
from ..style import ResolvedStyle
from .table_expansion import expand_table
from .text_metrics import wrap_text

logger = logging.getLogger(__name__)

UNKNOWN_BLOCK_HEIGHT = 20.0

# Empirically tuned admonition box constants.
ADMONITION_TITLE_GAP = 10.0
ADMONITION_MIN_PADDING = 4.0

TABLE_LABEL_OFFSET = -4.0
FIELD_LABEL_GAP = 4.0
FIELD_DEFAULT_HEIGHT = 22.0
TEXTAREA_DEFAULT_HEIGHT = 60.0


@dataclass(slots=True)
class ParagraphMetrics:
    lines: List[str]
    font_size: float
    line_height: float
    width: float

    @property
    def text_height(self) -> float:
        return len(self.lines) * self.line_height


@dataclass(slots=True)
class AdmonitionMetrics:
    lines: List[str]
    line_height: float
    content_height: float
    box_height: float


def paragraph_metrics(block: Paragraph, style: ResolvedStyle, available_width: float) -> ParagraphMetrics:
    paragraph = style.paragraph
    font_size = block.font_size or paragraph.font_size
    max_width = block.max_width or paragraph.max_width or available_width
    width = min(max_width, available_width)
    return ParagraphMetrics(
        lines=wrap_text(block.text, width, font_size),
        font_size=font_size,
        line_height=font_size * (paragraph.line_height or 1.5),
        width=width,
    )


def admonition_metrics(block: Admonition, style: ResolvedStyle, available_width: float) -> AdmonitionMetrics:
    """Box geometry of an admonition.

    The body height leaves out the line spacing after the last line so the
    box hugs its text.
    """
    box = style.admonition(block.variant)
    wrap_width = available_width - box.padding * 2 - box.border_width
    lines = wrap_text(block.text, wrap_width, box.content_font_size)
    line_height = box.content_font_size * box.content_line_height
    if lines:
        content_height = (len(lines) - 1) * line_height + box.content_font_size
    else:
        content_height = 0.0
    text_block = box.title_font_size + ADMONITION_TITLE_GAP + content_height
    return AdmonitionMetrics(
        lines=lines,
        line_height=line_height,
        content_height=content_height,
        box_height=text_block + ADMONITION_MIN_PADDING * 2,
    )


def table_label_height(table: Table, style: ResolvedStyle) -> float:
    if not table.label:
        return 0.0
    return style.label.font_size + TABLE_LABEL_OFFSET


def table_body_height(table: Table, style: ResolvedStyle) -> float:
    """Header plus rows of an already expanded table."""
    row_height = table.row_height if table.row_height is not None else style.table.row_height
    header_height = table.header_height if table.header_height is not None else style.table.header_height
    return header_height + len(table.rows) * row_height


def field_box_height(block: Field) -> float:
    if block.height:
        return block.height
    if block.field_type == "textarea":
        return TEXTAREA_DEFAULT_HEIGHT
    return FIELD_DEFAULT_HEIGHT


def field_label_height(block: Field, style: ResolvedStyle) -> float:
    if block.label_position == "left":
        return 0.0
    return style.label.font_size + FIELD_LABEL_GAP


def estimate_height(block: ContentBlock, style: ResolvedStyle, available_width: float) -> float:
    """Estimate the cursor advance for ``block``.

    Args:
        block: Content block to measure
        style: Resolved style the block will be drawn with
        available_width: Width of the content area in points

    Returns:
        Height in points, including the block's flow margins
    """
    if isinstance(block, Heading):
        spacing = style.spacing_for("heading")
        return style.heading(block.level).font_size + spacing.top + spacing.bottom

    if isinstance(block, Paragraph):
        spacing = style.spacing_for("paragraph")
        metrics = paragraph_metrics(block, style, available_width)
        return spacing.top + metrics.text_height + spacing.bottom

    if isinstance(block, Admonition):
        spacing = style.spacing_for("admonition")
        box_height = admonition_metrics(block, style, available_width).box_height
        return box_height + spacing.top + spacing.bottom

    if isinstance(block, Rule):
        spacing = style.spacing_for("rule")
        return style.rule.thickness + spacing.top + spacing.bottom

    if isinstance(block, Spacer):
        return block.height

    if isinstance(block, Table):
        spacing = style.spacing_for("table")
        expanded = expand_table(block)
        return (
            table_body_height(expanded, style)
            + table_label_height(expanded, style)
            + spacing.top
            + spacing.bottom
        )

    if isinstance(block, Field):
        spacing = style.spacing_for("field")
        return field_label_height(block, style) + field_box_height(block) + spacing.top + spacing.bottom

    logger.debug(f"Using minimum height for block type {getattr(block, 'type_name', type(block).__name__)}")
    return UNKNOWN_BLOCK_HEIGHT

"""Flow placement loop.

Blocks are placed in document order. For each block the loop

1. honours an explicit page number by moving forward to that page,
2. estimates the block height,
3. starts a new page first when the block would cross the bottom margin
   and the cursor is not already at the top of a page,
4. draws the block at the cursor, which records it and advances the cursor.

Blocks with an explicit ``position.y`` are drawn at their literal
coordinates instead and leave the cursor untouched, so flow and absolute
blocks can be mixed freely.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..models import ContentBlock
from .block_renderer import draw_block
from .height_estimator import estimate_height
from .page_engine import LayoutContext

logger = logging.getLogger(__name__)


class FlowLayout:
    """Places content blocks into a :class:`LayoutContext`."""

    def __init__(self, ctx: LayoutContext):
        self.ctx = ctx

    def place_all(self, blocks: Iterable[ContentBlock]) -> None:
        for index, block in enumerate(blocks):
            self.place(block, index)

    def place(self, block: ContentBlock, index: int = 0) -> None:
        ctx = self.ctx
        if block.position is not None and block.position.is_absolute:
            self._place_absolute(block, index)
            return

        if block.page is not None:
            if block.page > ctx.page_number:
                logger.debug(f"Block {index} moves layout forward to page {block.page}")
                ctx.ensure_page(block.page)
            elif block.page < ctx.page_number:
                logger.warning(
                    f"Block {index} asks for page {block.page} but layout is on page "
                    f"{ctx.page_number}; keeping the current page"
                )

        estimated = estimate_height(block, ctx.style, ctx.content_area.width)
        # A block taller than a whole page starts where it is instead of
        # leaving an empty page behind.
        if ctx.cursor.y - estimated < ctx.content_bottom and ctx.cursor.y < ctx.content_top:
            logger.debug(
                f"Block {index} ({block.block_type}, {estimated:.1f}pt) does not fit "
                f"in {ctx.remaining_space():.1f}pt, breaking page"
            )
            ctx.next_page()

        draw_block(ctx, block)

    def _place_absolute(self, block: ContentBlock, index: int) -> None:
        ctx = self.ctx
        position = block.position
        x = position.x if position.x is not None else ctx.content_area.x
        if block.page is None:
            page_index = ctx.current_page
        elif block.page < 1:
            logger.warning(f"Block {index} targets page {block.page}, placing it on page 1")
            page_index = 0
        else:
            page_index = block.page - 1
        with ctx.absolute(x, position.y, page_index):
            draw_block(ctx, block)

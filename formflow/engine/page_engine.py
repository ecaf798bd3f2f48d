"""Layout context: page list, flow cursor and page breaks.

One :class:`LayoutContext` is created per render and passed explicitly to
every placement step. It owns the backend page handles, the index of the
page being filled, the cursor and the registry of drawn elements.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Set

from ..backends.base import Backend
from ..exceptions import LayoutError
from ..style import ResolvedStyle, Spacing
from .geometry import Margins, Point, Rect, Size, content_rect
from .layout_validator import DrawnElement, DrawnElementRegistry

logger = logging.getLogger(__name__)


class LayoutContext:
    """Mutable layout state of a single render."""

    def __init__(self, backend: Backend, style: ResolvedStyle):
        self.backend = backend
        self.style = style
        self.page_size: Size = style.page_size
        self.margins: Margins = style.margins
        self.content_area: Rect = content_rect(self.page_size, self.margins)
        self.pages: List[Any] = []
        self.current_page = 0
        self.cursor = Point(self.content_area.x, self.content_top)
        self.drawn = DrawnElementRegistry()
        self.field_count = 0
        self._auto_names = 0
        self.field_names: Set[str] = set()
        self._breaks_enabled = True

    @classmethod
    def initialize(cls, backend: Backend, style: ResolvedStyle, page_count: int = 1) -> "LayoutContext":
        """Create a context with ``page_count`` pages and the cursor at the top of the first one."""
        ctx = cls(backend, style)
        if ctx.content_area.width <= 0 or ctx.content_area.height <= 0:
            raise LayoutError(
                "Margins leave no content area",
                f"page {ctx.page_size.width}x{ctx.page_size.height}, margins {ctx.margins}",
            )
        for _ in range(max(int(page_count or 1), 1)):
            ctx._append_page()
        logger.debug(f"Layout initialized with {len(ctx.pages)} page(s) of {ctx.page_size}")
        return ctx

    @property
    def content_top(self) -> float:
        """Top of content area in PDF coordinates."""
        return self.page_size.height - self.margins.top

    @property
    def content_bottom(self) -> float:
        """Bottom of content area in PDF coordinates."""
        return self.margins.bottom

    @property
    def page(self) -> Any:
        """Backend handle of the page being filled."""
        return self.pages[self.current_page]

    @property
    def page_number(self) -> int:
        return self.current_page + 1

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def in_absolute_block(self) -> bool:
        return not self._breaks_enabled

    def flow_spacing(self, block_type: str) -> Spacing:
        """Flow margins of ``block_type``; absolute blocks get none."""
        if self.in_absolute_block:
            return Spacing()
        return self.style.spacing_for(block_type)

    def remaining_space(self) -> float:
        return self.cursor.y - self.content_bottom

    def fits(self, height: float) -> bool:
        return self.cursor.y - height >= self.content_bottom

    def move_cursor_down(self, amount: float) -> None:
        self.cursor.y -= amount
        if self._breaks_enabled and self.cursor.y < self.content_bottom:
            self.next_page()

    def next_page(self) -> Any:
        """Continue on the next page, creating it when needed."""
        self.current_page += 1
        if self.current_page >= len(self.pages):
            self._append_page()
        self.cursor = Point(self.content_area.x, self.content_top)
        logger.debug(f"Page break to page {self.page_number}")
        return self.page

    def ensure_page(self, page_number: int) -> None:
        """Advance to ``page_number`` (1-based). Never moves backwards."""
        while self.page_number < page_number:
            self.next_page()

    def page_handle(self, index: int) -> Any:
        """Handle of page ``index`` (0-based), appending pages up to it."""
        while index >= len(self.pages):
            self._append_page()
        return self.pages[index]

    @contextmanager
    def absolute(self, x: float, y: float, page_index: Optional[int] = None) -> Iterator["LayoutContext"]:
        """Temporarily move the cursor to literal coordinates.

        Page breaks are disabled inside the block and the flow cursor and
        page index are restored afterwards, so absolutely positioned content
        never affects the flow.
        """
        saved_cursor = Point(self.cursor.x, self.cursor.y)
        saved_page = self.current_page
        saved_breaks = self._breaks_enabled
        if page_index is not None:
            self.page_handle(page_index)
            self.current_page = page_index
        self.cursor = Point(x, y)
        self._breaks_enabled = False
        try:
            yield self
        finally:
            self.cursor = saved_cursor
            self.current_page = saved_page
            self._breaks_enabled = saved_breaks

    def record(self, element_type: str, bounds: Rect, content: Optional[str] = None,
               page_number: Optional[int] = None) -> DrawnElement:
        element = DrawnElement(
            type=element_type,
            page=page_number or self.page_number,
            bounds=bounds,
            content=content,
        )
        self.drawn.append(element)
        return element

    def register_field(self, name: str) -> str:
        """Count a created field, naming it when it has no name.

        A repeated name is still counted but logged: PDF viewers merge
        widgets that share a name into a single field.
        """
        self.field_count += 1
        if not name:
            self._auto_names += 1
            name = f"field_{self._auto_names}"
        if name in self.field_names:
            logger.warning(f"Duplicate field name {name!r}; its widgets will share one value")
        self.field_names.add(name)
        return name

    def _append_page(self) -> Any:
        handle = self.backend.new_page(self.page_size.width, self.page_size.height)
        self.pages.append(handle)
        return handle
